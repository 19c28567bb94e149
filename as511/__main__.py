"""
Command line entrypoint, used by ``python -m as511`` and exported as the ``as511`` console script.
"""

import logging
import sys

try:
    import click
except ImportError as e:
    print(e)
    print("Try using 'pip install python-as511[cli]'")
    exit()

from as511 import __version__
from as511.client import Client
from as511.error import AS511Error, error_text
from as511.type import BlockType
from as511.util import strip_envelope

logger = logging.getLogger("AS511.Client")

BLOCK_TYPES = click.Choice([block_type.name for block_type in BlockType], case_sensitive=False)


def default_port() -> str:
    """Usual name of the first USB serial adapter on this platform."""
    if sys.platform == "win32":
        return "COM3"
    return "/dev/ttyUSB0"


def parse_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter(f"not a hex string: {value}")


@click.group()
@click.option("-p", "--port", default=default_port, show_default=True, help="Serial port the PLC is attached to.")
@click.option("-v", "--verbose", is_flag=True, help="Also print debug-output.")
@click.version_option(__version__)
@click.help_option("-h", "--help")
@click.pass_context
def main(ctx: click.Context, port: str, verbose: bool) -> None:
    """Exchange memory blocks with a S5 PLC over AS511."""

    # setup logging
    if verbose:
        logging.basicConfig(format="[%(levelname)s]: %(message)s", level=logging.DEBUG)
    else:
        logging.basicConfig(format="[%(levelname)s]: %(message)s", level=logging.INFO)

    ctx.obj = Client(port)


def run(client: Client, operation):
    """Run ``operation`` on a connected client, reporting AS511 errors as click errors."""
    try:
        with client:
            return operation(client)
    except AS511Error as e:
        logger.debug(f"operation failed: {e!r}")
        raise click.ClickException(f"{error_text(e.error_code)}: {e}")


@main.command()
@click.argument("block_type", type=BLOCK_TYPES)
@click.argument("number", type=click.IntRange(0, 255))
@click.pass_obj
def info(client: Client, block_type: str, number: int) -> None:
    """Show the address range of a block, e.g. `info DB 100`."""
    block = run(client, lambda c: c.block_info(BlockType[block_type.upper()], number))
    click.echo(f"initial address: {block.initial_address_bytes.hex(' ')}")
    click.echo(f"block length:    {block.block_length}")
    click.echo(f"final address:   {block.final_address_bytes.hex(' ')}")


@main.command()
@click.argument("block_type", type=BLOCK_TYPES)
@click.argument("number", type=click.IntRange(0, 255))
@click.option("--raw", is_flag=True, help="Keep the envelope bytes of the reply.")
@click.pass_obj
def read(client: Client, block_type: str, number: int, raw: bool) -> None:
    """Read a whole block and print it as hex."""
    data = run(client, lambda c: c.read_block(BlockType[block_type.upper()], number))
    click.echo((data if raw else strip_envelope(data)).hex(" "))


@main.command()
@click.argument("block_type", type=BLOCK_TYPES)
@click.argument("number", type=click.IntRange(0, 255))
@click.argument("data")
@click.pass_obj
def write(client: Client, block_type: str, number: int, data: str) -> None:
    """Write hex DATA to the start of a block, e.g. `write DB 100 12131415`."""
    payload = parse_hex(data)

    def operation(c: Client) -> None:
        block = c.block_info(BlockType[block_type.upper()], number)
        c.write(block.initial_address, payload)

    run(client, operation)
    click.echo(f"wrote {len(payload)} bytes")


if __name__ == "__main__":
    main()
