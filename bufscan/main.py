import sys
import logging

from os import PathLike
from typing import Iterable, Iterator, Literal, Optional

from bufscan.config import Config, SCANNER_OPTIONS, read_file
from bufscan.errors import NumberFormatError
from bufscan.numeric import parse_float, parse_int, strip_commas
from bufscan.scanner import Scanner

logging.basicConfig(format="{name}: {message}", style="{")
logger = logging.getLogger("bufscan")

TokenType = Literal["str", "int", "float"]


def set_verbosity(*, verbose=False, debug=False) -> None:
    if debug:
        logger.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)


def load_config(*,
                config_file: Optional[str | PathLike[str]] = None,
                options: Iterable[str] = ()) -> Config:
    """Build the scanner configuration.

    Options from `config_file` are applied first, then `options` strings
    of the form `<name>=<value>` are layered on top.

    Raises:
        ConfigError
    """
    if config_file is not None:
        config = read_file(SCANNER_OPTIONS, config_file)
        logger.info("configuration loaded from %s", config_file)
    else:
        config = Config(SCANNER_OPTIONS, strict=True)

    options = list(options)
    if options:
        config.parse(options)
    config.validate()
    return config


def _convert(token: str,
             token_type: TokenType,
             radix: int,
             width: Optional[int]) -> str | int | float | None:
    if token_type == "str":
        return token
    try:
        if token_type == "int":
            return parse_int(strip_commas(token), radix, width)
        return parse_float(strip_commas(token), radix)
    except NumberFormatError as e:
        logger.warning("%s", e)
        return None


def scan_tokens(scanner: Scanner,
                token_type: TokenType = "str",
                width: Optional[int] = 32) -> Iterator[str | int | float | None]:
    """Yield tokens converted to `token_type` until the stream is exhausted.

    Tokens that are not valid numbers are yielded as None.
    """
    count = 0
    for token in scanner:
        count += 1
        yield _convert(token, token_type, scanner.radix, width)

    logger.info("%s: %d tokens", scanner.source.name, count)


def scan_lines(scanner: Scanner) -> Iterator[tuple[int, str]]:
    """Yield numbered lines of the stream, starting from 1."""
    for number, line in enumerate(scanner.lines(), 1):
        yield number, line


def open_input(path: Optional[str]):
    if path is None or path == "-":
        return sys.stdin.buffer
    return open(path, 'rb')
