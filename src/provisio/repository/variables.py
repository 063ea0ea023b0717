"""
Discovery and substitution of `${NAME}` and `$NAME` placeholders in raw artifacts.
"""

from collections.abc import Iterable
import re

from loguru import logger

from provisio.config.variables import VariablesGetter
from provisio.errors import MissingVariableError

# The bare form must not be preceded by an identifier character, so that e.g. `a$b` is left alone.
VARIABLE_PATTERN = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?<![A-Za-z0-9_])\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)


def _name(match: re.Match[str]) -> str:
    return match.group("braced") or match.group("bare")


def inspect_variables(raw: bytes) -> list[str]:
    """
    Return the names of all variables referenced in *raw*, each once, in order of first occurrence.
    """

    names = dict.fromkeys(_name(match) for match in VARIABLE_PATTERN.finditer(raw.decode("utf-8")))
    return list(names)


def replace_variables(
    raw: bytes,
    variables: Iterable[str],
    getter: VariablesGetter,
    skip_missing: bool = False,
) -> bytes:
    """
    Replace the placeholders of the given *variables* in *raw* with their values from *getter*. Placeholders of names
    that are not listed in *variables* are left untouched. Values are inserted literally and are not scanned for
    placeholders again.

    Args:
        raw: The raw artifact.
        variables: The variables to replace, usually the result of [inspect_variables].
        getter: The source of variable values.
        skip_missing: If enabled, placeholders of variables that the *getter* does not know are kept as-is instead
                      of raising an error.
    Returns:
        A new byte string with the placeholders replaced.
    Raises:
        MissingVariableError: If *skip_missing* is disabled and at least one variable is not defined. Nothing is
                              substituted in that case.
    """

    values: dict[str, str] = {}
    missing: list[str] = []
    for name in variables:
        try:
            values[name] = getter.get(name)
        except KeyError:
            missing.append(name)

    if missing:
        if not skip_missing:
            raise MissingVariableError(missing)
        logger.debug("Keeping placeholders for undefined variables: {}", ", ".join(missing))

    def repl(match: re.Match[str]) -> str:
        return values.get(_name(match), match.group(0))

    return VARIABLE_PATTERN.sub(repl, raw.decode("utf-8")).encode("utf-8")
