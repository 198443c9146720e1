import pytest
import yaml

from binser.codecs import STRING, PairCodec, UINT32
from binser.config import load_schema, parse_schema


def write_schema(tmp_path, data):
    path = tmp_path / "schema.yaml"
    path.write_text(yaml.dump(data))
    return str(path)


def test_load_schema(tmp_path):
    path = write_schema(
        tmp_path,
        {
            "records": [
                {"name": "header", "type": "pair[str, uint32]"},
                {"name": "samples", "type": "list[float64]"},
            ]
        },
    )
    records = load_schema(path)
    assert [r.name for r in records] == ["header", "samples"]
    assert records[0].codec == PairCodec(STRING, UINT32)
    assert records[1].codec.name == "list[float64]"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_schema(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize(
    "schema",
    [
        None,
        [],
        {"records": "nope"},
        {"records": [{"name": "a"}]},
        {"records": ["a"]},
    ],
)
def test_invalid_shapes(schema):
    with pytest.raises(ValueError):
        parse_schema(schema)


def test_duplicate_record_names():
    with pytest.raises(ValueError, match="Duplicate"):
        parse_schema({"records": [{"name": "a", "type": "int32"}, {"name": "a", "type": "str"}]})


def test_invalid_type_names_record():
    with pytest.raises(ValueError, match="Record samples"):
        parse_schema({"records": [{"name": "samples", "type": "list[nope]"}]})
