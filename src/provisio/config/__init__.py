"""
The configuration store: the list of known providers and the variables available for substitution into provider
artifacts. Variables are resolved with the precedence environment > configuration file > defaults.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

from loguru import logger

from provisio.config.provider import Provider, ProviderType, parse_provider_type
from provisio.config.variables import (
    EnvironmentVariables,
    LayeredVariables,
    MappingVariables,
    VariablesGetter,
)
from provisio.errors import InvalidArgumentsError
from provisio.tools.fs import find_config_file

__all__ = [
    "Config",
    "EnvironmentVariables",
    "LayeredVariables",
    "MappingVariables",
    "Provider",
    "ProviderType",
    "VariablesGetter",
    "config_home",
]

CONFIG_HOME_ENV = "PROVISIO_CONFIG_HOME"
""" Environment variable to override the location of the configuration home. """

CONFIG_FOLDER = ".provisio"
""" Name of the configuration home directory inside the user's home directory. """

OVERRIDES_FOLDER = "overrides"
""" Name of the directory inside the configuration home that contains local overrides. """

_GITHUB = "https://github.com"

DEFAULT_PROVIDERS = [
    Provider(
        "cluster-api",
        f"{_GITHUB}/kubernetes-sigs/cluster-api/releases/latest/core-components.yaml",
        ProviderType.CORE,
    ),
    Provider(
        "kubeadm",
        f"{_GITHUB}/kubernetes-sigs/cluster-api/releases/latest/bootstrap-components.yaml",
        ProviderType.BOOTSTRAP,
    ),
    Provider(
        "kubeadm",
        f"{_GITHUB}/kubernetes-sigs/cluster-api/releases/latest/control-plane-components.yaml",
        ProviderType.CONTROL_PLANE,
    ),
    Provider(
        "aws",
        f"{_GITHUB}/kubernetes-sigs/cluster-api-provider-aws/releases/latest/infrastructure-components.yaml",
        ProviderType.INFRASTRUCTURE,
    ),
    Provider(
        "azure",
        f"{_GITHUB}/kubernetes-sigs/cluster-api-provider-azure/releases/latest/infrastructure-components.yaml",
        ProviderType.INFRASTRUCTURE,
    ),
    Provider(
        "metal3",
        f"{_GITHUB}/metal3-io/cluster-api-provider-metal3/releases/latest/infrastructure-components.yaml",
        ProviderType.INFRASTRUCTURE,
    ),
    Provider(
        "openstack",
        f"{_GITHUB}/kubernetes-sigs/cluster-api-provider-openstack/releases/latest/infrastructure-components.yaml",
        ProviderType.INFRASTRUCTURE,
    ),
    Provider(
        "vsphere",
        f"{_GITHUB}/kubernetes-sigs/cluster-api-provider-vsphere/releases/latest/infrastructure-components.yaml",
        ProviderType.INFRASTRUCTURE,
    ),
]
""" Providers that are known without any configuration. """


def config_home(environ: Mapping[str, str] | None = None) -> Path:
    """
    Return the configuration home, which is `~/.provisio` unless overridden with `PROVISIO_CONFIG_HOME`.
    """

    environ = os.environ if environ is None else environ
    if value := environ.get(CONFIG_HOME_ENV):
        return Path(value).expanduser()
    return Path.home() / CONFIG_FOLDER


@dataclass
class ProviderEntry:
    """
    A provider as declared in the `providers` list of the configuration file.
    """

    name: str
    url: str
    type: str


@dataclass
class Config:
    """
    Wrapper for the configuration file and the providers and variables derived from it.
    """

    FILENAME = "provisio.yaml"

    file: Path | None
    home: Path
    providers: list[Provider] = field(default_factory=lambda: list(DEFAULT_PROVIDERS))
    variables: VariablesGetter = field(default_factory=MappingVariables)

    @property
    def overrides_path(self) -> Path:
        return self.home / OVERRIDES_FOLDER

    @staticmethod
    def load(
        file: Path | None = None,
        /,
        *,
        home: Path | None = None,
        environ: Mapping[str, str] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> "Config":
        """
        Load the configuration from the given file, or from a `provisio.yaml` found in the current directory, any of
        its parents or the configuration home. If no file is found, only the built-in providers and the environment
        and *defaults* variables are available.
        """

        from databind.json import load as deser
        from yaml import safe_load

        if home is None:
            home = config_home(environ)
        if file is None:
            file = find_config_file(Config.FILENAME, fallback=home)

        data: dict[str, Any] = {}
        if file is not None:
            logger.debug("Loading configuration from '{}'", file)
            data = safe_load(file.read_text()) or {}
            if not isinstance(data, dict):
                raise InvalidArgumentsError(f"configuration file '{file}' must contain a mapping")

        entries = deser(data.pop("providers", None) or [], list[ProviderEntry], filename=str(file or Config.FILENAME))
        providers = _merge_providers(DEFAULT_PROVIDERS, entries)

        file_variables = {key: value for key, value in data.items() if not isinstance(value, (dict, list))}
        variables = LayeredVariables(
            EnvironmentVariables(environ),
            MappingVariables(file_variables),
            MappingVariables(defaults),
        )

        return Config(file, home, providers, variables)

    def list_providers(self) -> list[Provider]:
        """
        Returns all providers ordered by type (core, bootstrap, control plane, infrastructure) and then by name.
        """

        return sorted(self.providers, key=lambda p: (p.type.order, p.name))

    def get_provider(self, name: str, provider_type: ProviderType) -> Provider:
        for provider in self.providers:
            if provider.name == name and provider.type == provider_type:
                return provider
        raise InvalidArgumentsError(f"failed to get configuration for the {provider_type.value} with name {name!r}")


def _merge_providers(defaults: list[Provider], entries: list[ProviderEntry]) -> list[Provider]:
    """
    Merge user-declared providers into the default ones. A user-declared provider replaces the default provider with
    the same name and type.
    """

    providers = {(p.name, p.type): p for p in defaults}
    for entry in entries:
        if not entry.name:
            raise InvalidArgumentsError("provider entries in the configuration file must have a name")
        if not entry.url:
            raise InvalidArgumentsError(f"provider {entry.name!r} in the configuration file must have a url")
        try:
            provider_type = parse_provider_type(entry.type)
        except ValueError as exc:
            raise InvalidArgumentsError(f"provider {entry.name!r}: {exc}") from exc
        providers[(entry.name, provider_type)] = Provider(entry.name, entry.url, provider_type)
    return list(providers.values())
