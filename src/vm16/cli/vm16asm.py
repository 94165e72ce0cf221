"""
vm16asm - VM16 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the VM16 assembler.
It assembles a source file, prints the listing and a word dump, and
optionally writes the machine image, listing and symbol files.

Usage Examples
--------------
Basic assembly (listing and word dump to stdout):
    $ vm16asm hello.asm

With output file:
    $ vm16asm hello.asm -o hello.bin

Generate all output files:
    $ vm16asm hello.asm -o hello.bin -l hello.lst -s hello.sym

With include path and defines:
    $ vm16asm -I ./include -D SCREEN=$EC00 program.asm

Include paths can also come from the environment:
    $ VM16_INCLUDE=lib:vendor vm16asm program.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from vm16 import __version__
from vm16.assembler import Assembler
from vm16.assembler.literals import parse_int
from vm16.cli.errors import handle_cli_exception
from vm16.errors import AssemblerError


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_defines(
    ctx: click.Context,
    param: click.Parameter,
    values: tuple[str, ...],
) -> dict[str, int]:
    """Turn repeated NAME=VALUE options into a symbol dictionary."""
    defines: dict[str, int] = {}
    for defn in values:
        if "=" in defn:
            name, value_str = defn.split("=", 1)
            try:
                defines[name.strip()] = parse_int(value_str.strip())
            except AssemblerError as e:
                raise click.BadParameter(f"invalid value in {defn}: {e.message}")
        else:
            # Symbol without value defaults to 1
            defines[defn.strip()] = 1
    return defines


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the machine image (big-endian 16-bit words)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-I", "--include",
    multiple=True,
    envvar="VM16_INCLUDE",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Add include search path (can be repeated, also read from VM16_INCLUDE)",
)
@click.option(
    "-D", "--define",
    multiple=True,
    callback=parse_defines,
    help="Define symbol (format: NAME=VALUE, value in decimal, $hex or %binary)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vm16asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    include: tuple[Path, ...],
    define: dict[str, int],
    verbose: bool,
) -> None:
    """
    Assemble VM16 source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The listing and a hex dump of the machine words are printed to
    standard output.

    \b
    Examples:
        vm16asm hello.asm                # Listing and word dump only
        vm16asm hello.asm -o hello.bin   # Also write the machine image
        vm16asm -I inc/ hello.asm        # Add include path
        vm16asm -D DEBUG=1 hello.asm     # Define symbol
    """
    setup_logging(verbose)

    asm = Assembler(include_paths=include, defines=define)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        program = asm.assemble_file(input_file)

        click.echo(program.get_listing())
        click.echo()
        click.echo(program.get_word_dump())

        if output:
            asm.write_binary(output)
            if verbose:
                click.echo(f"Wrote {len(program)} words to {output}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(f"Assembly complete: {len(program)} words")
            click.echo(f"Defined {len(program.symbols)} symbols")
            click.echo(program.get_symbol_listing())

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
