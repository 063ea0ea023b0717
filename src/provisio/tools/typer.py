from typing import Any

from loguru import logger
from typer import Exit, Typer

from provisio.errors import ProvisioError


def new_typer(**kwargs: Any) -> Typer:
    return Typer(no_args_is_help=True, pretty_exceptions_enable=False, **kwargs)


def fail(exc: ProvisioError) -> Exit:
    """
    Log a user-facing error and return the exception to raise for exiting the command with a non-zero status.
    """

    logger.error("{}", exc)
    return Exit(1)
