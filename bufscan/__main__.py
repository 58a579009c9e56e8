import re
import sys

import click

from bufscan.__version__ import __version__
from bufscan.errors import ConfigError, ScanError
from bufscan.main import (
    load_config,
    open_input,
    scan_lines,
    scan_tokens,
    set_verbosity,
)
from bufscan.scanner import Scanner


def build_scanner(stream, config_file, define, delimiter, literal, radix):
    options = list(define)
    if delimiter is not None:
        options.append(f"delimiter={delimiter}")
    if literal:
        options.append("literal=true")
    if radix is not None:
        options.append(f"radix={radix}")
    try:
        config = load_config(config_file=config_file, options=options)
        return Scanner.from_config(stream, config), config
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    except re.error as e:
        raise click.ClickException(f"invalid delimiter: {e}") from e


@click.group()
@click.version_option(__version__, prog_name="bufscan")
def main():
    pass


@main.command()
@click.argument("file", required=False, metavar="[FILE]",
                type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("-t", "--type", "token_type", default="str",
              type=click.Choice(["str", "int", "float"]),
              help="convert tokens to this type")
@click.option("--delimiter", metavar="PATTERN",
              help="delimiter regular expression")
@click.option("--literal", is_flag=True,
              help="match the delimiter verbatim")
@click.option("--radix", type=int, help="radix of numeric tokens")
@click.option("-c", "--config", "config_file",
              type=click.Path(exists=True, dir_okay=False, readable=True),
              help="configuration file")
@click.option("-d", "--define", multiple=True, metavar="NAME=VALUE")
@click.option("-v", "--verbose", is_flag=True)
@click.option("--debug", is_flag=True)
def tokens(file, token_type, delimiter, literal, radix, config_file, define,
           verbose, debug):
    """Print the tokens of FILE (or stdin), one per line."""
    set_verbosity(verbose=verbose, debug=debug)
    stream = open_input(file)
    try:
        scanner, config = build_scanner(stream, config_file, define,
                                        delimiter, literal, radix)
        for value in scan_tokens(scanner, token_type, config.width):
            click.echo("" if value is None else value)
    except ScanError as e:
        raise click.ClickException(str(e)) from e
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()


@main.command()
@click.argument("file", required=False, metavar="[FILE]",
                type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("-v", "--verbose", is_flag=True)
@click.option("--debug", is_flag=True)
def lines(file, verbose, debug):
    """Print the numbered lines of FILE (or stdin)."""
    set_verbosity(verbose=verbose, debug=debug)
    stream = open_input(file)
    try:
        scanner = Scanner(stream)
        for number, line in scan_lines(scanner):
            click.echo(f"{number}: {line!r}")
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()


if __name__ == "__main__":
    main()
