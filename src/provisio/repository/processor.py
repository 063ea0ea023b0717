from abc import ABC, abstractmethod

from loguru import logger

from provisio.config.variables import VariablesGetter
from provisio.repository.variables import inspect_variables, replace_variables

TEMPLATE_NAME_PREFIX = "cluster-template"


class YamlProcessor(ABC):
    """
    Processes the raw YAML of a cluster template into the final YAML.
    """

    @abstractmethod
    def artifact_name(self, version: str, flavor: str) -> str:
        """
        Return the name of the file that contains the template for the given version and flavor.
        """

        raise NotImplementedError

    @abstractmethod
    def get_variables(self, raw: bytes) -> list[str]:
        """
        Return the variables referenced in the raw YAML.
        """

        raise NotImplementedError

    @abstractmethod
    def process(self, raw: bytes, getter: VariablesGetter) -> bytes:
        """
        Return the final YAML, with all variables replaced by values from *getter*.
        """

        raise NotImplementedError


class SimpleProcessor(YamlProcessor):
    """
    The default processor. Templates are named `cluster-template[-<flavor>].yaml` and use `${VAR}` or `$VAR`
    placeholders.
    """

    def __init__(self, skip_missing: bool = False) -> None:
        self.skip_missing = skip_missing

    def artifact_name(self, version: str, flavor: str) -> str:
        name = TEMPLATE_NAME_PREFIX
        if flavor:
            name = f"{name}-{flavor}"
        return f"{name}.yaml"

    def get_variables(self, raw: bytes) -> list[str]:
        variables = inspect_variables(raw)
        logger.trace("Found {} variable(s): {}", len(variables), variables)
        return variables

    def process(self, raw: bytes, getter: VariablesGetter) -> bytes:
        return replace_variables(raw, self.get_variables(raw), getter, self.skip_missing)
