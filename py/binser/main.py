"""Main entry point and CLI for encoding and decoding binser streams."""

import logging
import sys
from typing import Any

import click
import yaml

from binser.api import serialize
from binser.config import RecordSpec, load_schema
from binser.context import current_record
from binser.errors import SerializationError
from binser.log import setup_logging
from binser.registry import parse_type
from binser.stream import ByteReader, ByteWriter

logger = logging.getLogger(__name__)


def _encode_records(records: list[RecordSpec], values: dict[str, Any], writer: ByteWriter) -> None:
    for record in records:
        token = current_record.set(record.name)
        try:
            value = record.codec.from_plain(values[record.name])
            serialize(value, writer, record.codec)
            logger.debug(f"Encoded {record.codec.name}")
        finally:
            current_record.reset(token)


def _decode_records(records: list[RecordSpec], reader: ByteReader) -> dict[str, Any]:
    decoded: dict[str, Any] = {}
    for record in records:
        token = current_record.set(record.name)
        try:
            value = record.codec.deserialize(reader)
            decoded[record.name] = record.codec.to_plain(value)
            logger.debug(f"Decoded {record.codec.name}")
        finally:
            current_record.reset(token)
    return decoded


def _fail(message: str, exc: Exception, verbose: int) -> None:
    logger.error(f"{message}: {exc}", exc_info=verbose > 0)
    sys.exit(1)


@click.group()
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: DEBUG, -vv: TRACE)",
)
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """Binary serialization toolkit.

    Encode YAML values into binser streams and decode them back, following
    a YAML schema that lists the records of the stream in order.

    Example usage:

        binser encode schema.yaml values.yaml out.bin

        binser decode schema.yaml out.bin

        binser describe "dict[str, list[int32]]"
    """
    # -v 0 (default): INFO
    # -v:             DEBUG
    # -vv:            TRACE
    setup_logging(verbose)
    ctx.obj = {"verbose": verbose}


@main.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@click.argument("values", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def encode(ctx: click.Context, schema: str, values: str, output: str) -> None:
    """Write the records of VALUES to OUTPUT in SCHEMA order."""
    verbose = ctx.obj["verbose"]
    try:
        records = load_schema(schema)
        with open(values) as f:
            document = yaml.safe_load(f)
        if not isinstance(document, dict):
            raise ValueError("Values file must contain a mapping of record names to values")
        missing = [record.name for record in records if record.name not in document]
        if missing:
            raise ValueError(f"Missing values for records: {', '.join(missing)}")

        with open(output, "wb") as f:
            writer = ByteWriter(f)
            _encode_records(records, document, writer)
    except (SerializationError, ValueError, TypeError, OSError, yaml.YAMLError) as e:
        _fail("Encoding failed", e, verbose)

    logger.info(f"Wrote {len(records)} records ({writer.written} bytes) to {output}")


@main.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@click.argument("input", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def decode(ctx: click.Context, schema: str, input: str) -> None:
    """Read the records of INPUT in SCHEMA order and print them as YAML."""
    verbose = ctx.obj["verbose"]
    try:
        records = load_schema(schema)
        with open(input, "rb") as f:
            reader = ByteReader(f)
            decoded = _decode_records(records, reader)
            if not reader.at_end():
                raise ValueError(f"Trailing bytes after {reader.consumed} bytes of records")
    except (SerializationError, ValueError, TypeError, OSError, yaml.YAMLError) as e:
        _fail("Decoding failed", e, verbose)

    click.echo(yaml.safe_dump(decoded, sort_keys=False, allow_unicode=True), nl=False)


@main.command()
@click.argument("expr")
def describe(expr: str) -> None:
    """Print the normalized form of the type expression EXPR."""
    try:
        codec = parse_type(expr)
    except ValueError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    click.echo(codec.name)


if __name__ == "__main__":
    main()
