from abc import ABC, abstractmethod
from collections.abc import Mapping
import os
from typing import Any


class VariablesGetter(ABC):
    """
    A read-only source of named string variables.
    """

    @abstractmethod
    def get(self, key: str) -> str:
        """
        Retrieve a variable by name.

        Args:
            key: The name of the variable to retrieve.
        Returns:
            The variable value.
        Raises:
            KeyError: If the variable is not defined.
        """


class MappingVariables(VariablesGetter):
    """
    Variables served from a mapping. Non-string scalar values are converted with `str()`; values that are `None`
    count as undefined.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values = {key: str(value) for key, value in (values or {}).items() if value is not None}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._values)})"

    def get(self, key: str) -> str:
        return self._values[key]


class EnvironmentVariables(VariablesGetter):
    """
    Variables served from the process environment.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str:
        return self._environ[key]


class LayeredVariables(VariablesGetter):
    """
    Looks up a variable in each of the given layers in order and returns the first value found.
    """

    def __init__(self, *layers: VariablesGetter) -> None:
        self._layers = layers

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self._layers))})"

    def get(self, key: str) -> str:
        for layer in self._layers:
            try:
                return layer.get(key)
            except KeyError:
                continue
        raise KeyError(key)
