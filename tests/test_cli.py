import pytest
import yaml
from click.testing import CliRunner

from binser import loads
from binser.main import main

SCHEMA = {
    "records": [
        {"name": "header", "type": "pair[str, uint32]"},
        {"name": "samples", "type": "list[float64]"},
        {"name": "tags", "type": "set[str]"},
        {"name": "payload", "type": "framed[MsgpackMessage]"},
        {"name": "blob", "type": "bytes"},
        {"name": "z", "type": "complex[float64]"},
    ]
}

VALUES = {
    "header": ["hello", 7],
    "samples": [1.5, -2.25],
    "tags": ["b", "a"],
    "payload": {"k": [1, 2]},
    "blob": "raw",
    "z": [1.0, 2.0],
}


@pytest.fixture(autouse=True)
def _logging(restore_logging):
    yield


@pytest.fixture
def files(tmp_path):
    schema = tmp_path / "schema.yaml"
    values = tmp_path / "values.yaml"
    schema.write_text(yaml.safe_dump(SCHEMA))
    values.write_text(yaml.safe_dump(VALUES))
    return schema, values, tmp_path / "out.bin"


def test_encode_then_decode(files):
    schema, values, output = files
    runner = CliRunner()

    result = runner.invoke(main, ["encode", str(schema), str(values), str(output)])
    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"\x01\x05hello\x01\x07")

    result = runner.invoke(main, ["decode", str(schema), str(output)])
    assert result.exit_code == 0, result.output
    decoded = yaml.safe_load(result.stdout)
    assert decoded == {
        "header": ["hello", 7],
        "samples": [1.5, -2.25],
        "tags": ["a", "b"],
        "payload": {"k": [1, 2]},
        "blob": b"raw",
        "z": [1.0, 2.0],
    }


def test_encode_missing_value(files):
    schema, values, output = files
    values.write_text(yaml.safe_dump({"header": ["x", 1]}))
    result = CliRunner().invoke(main, ["encode", str(schema), str(values), str(output)])
    assert result.exit_code == 1


def test_encode_out_of_range_value(files):
    schema, values, output = files
    values.write_text(yaml.safe_dump({**VALUES, "header": ["x", -1]}))
    result = CliRunner().invoke(main, ["encode", str(schema), str(values), str(output)])
    assert result.exit_code == 1


def test_decode_rejects_trailing_bytes(tmp_path):
    schema = tmp_path / "schema.yaml"
    schema.write_text(yaml.safe_dump({"records": [{"name": "n", "type": "int32"}]}))
    data = tmp_path / "data.bin"
    data.write_bytes(b"\x01\x05\x00")
    result = CliRunner().invoke(main, ["decode", str(schema), str(data)])
    assert result.exit_code == 1


def test_decode_truncated_stream(tmp_path):
    schema = tmp_path / "schema.yaml"
    schema.write_text(yaml.safe_dump({"records": [{"name": "n", "type": "list[int32]"}]}))
    data = tmp_path / "data.bin"
    data.write_bytes(b"\x01\x02\x01\x05")
    result = CliRunner().invoke(main, ["decode", str(schema), str(data)])
    assert result.exit_code == 1


def test_describe():
    result = CliRunner().invoke(main, ["describe", "tuple[int, dict[str,double]]"])
    assert result.exit_code == 0
    assert result.output == "pair[int64, dict[str, float64]]\n"
    assert loads("pair[int64, dict[str, float64]]", b"\x00\x00") == (0, {})


def test_describe_invalid():
    result = CliRunner().invoke(main, ["describe", "list["])
    assert result.exit_code == 1
