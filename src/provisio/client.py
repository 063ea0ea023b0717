"""
The high-level client that resolves providers from the configuration and renders their components and cluster
templates.
"""

from collections.abc import Callable
from dataclasses import dataclass
import re

from loguru import logger

from provisio.config import Config, LayeredVariables, MappingVariables, Provider, ProviderType, VariablesGetter
from provisio.errors import InvalidArgumentsError
from provisio.repository import Repository
from provisio.repository.artifacts import Components, Template
from provisio.repository.client import RepositoryClient
from provisio.repository.factory import repository_factory
from provisio.repository.overrides import LocalOverrides
from provisio.repository.versions import is_version

DEFAULT_TARGET_NAMESPACE = "default"

_DNS1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


@dataclass
class ComponentsOptions:
    target_namespace: str = ""
    """ The namespace to install the components in. If empty, the namespace defined by the components is used. """

    watching_namespace: str = ""
    """ The namespace the provider controller should watch. If empty, all namespaces are watched. """

    skip_variables: bool = False
    """ Keep placeholders of variables that are not defined instead of failing. """


@dataclass
class ClusterTemplateOptions:
    """
    The well-known variables that all cluster templates are expected to handle, plus the options for selecting the
    template. Templates may use more variables; those can only be set via the environment or the configuration file.
    """

    provider: str = ""
    """ The infrastructure provider to read the template from, in the form `name[:version]`. """

    flavor: str = ""
    cluster_name: str = ""
    target_namespace: str = ""
    """ The namespace to place the cluster objects in. Defaults to `default`. """

    kubernetes_version: str = ""
    """ If empty, `KUBERNETES_VERSION` is read from the environment or the configuration file. """

    control_plane_machine_count: int | None = None
    worker_machine_count: int | None = None
    list_variables_only: bool = False


class Client:
    """
    Entrypoint for working with the provider repositories known to a [Config].
    """

    def __init__(self, config: Config, repositories: Callable[[Provider], Repository] | None = None) -> None:
        """
        Args:
            config: The configuration to read providers and variables from.
            repositories: Creates the repository backend for a provider. Defaults to selecting a backend by the
                          provider URL.
        """

        self.config = config
        self._repositories = repositories or repository_factory

    def get_providers_config(self) -> list[Provider]:
        return self.config.list_providers()

    def repository_client(self, provider: Provider, variables: VariablesGetter | None = None) -> RepositoryClient:
        return RepositoryClient(
            provider,
            variables or self.config.variables,
            LocalOverrides(self.config.overrides_path),
            repository=self._repositories(provider),
        )

    def get_provider_versions(self, provider: str, provider_type: ProviderType) -> list[str]:
        name, _ = parse_provider_name(provider)
        return self.repository_client(self.config.get_provider(name, provider_type)).get_versions()

    def get_provider_components(
        self, provider: str, provider_type: ProviderType, options: ComponentsOptions | None = None
    ) -> Components:
        """
        Render the components of a provider.

        Args:
            provider: The provider name, optionally with a version (`name:version`).
            provider_type: The type of the provider.
            options: Options for rendering the components.
        """

        options = options or ComponentsOptions()
        name, version = parse_provider_name(provider)
        client = self.repository_client(self.config.get_provider(name, provider_type))
        return client.components(options.skip_variables).get(
            version, options.target_namespace, options.watching_namespace
        )

    def get_cluster_template(self, options: ClusterTemplateOptions) -> Template:
        """
        Render a cluster template. The template options take precedence over variables from the environment and the
        configuration file.
        """

        if not options.provider:
            raise InvalidArgumentsError("please specify the infrastructure provider to read the template from")

        name, version = parse_provider_name(options.provider)
        provider = self.config.get_provider(name, ProviderType.INFRASTRUCTURE)
        target_namespace = options.target_namespace or DEFAULT_TARGET_NAMESPACE

        variables = LayeredVariables(
            MappingVariables(template_options_to_variables(options, target_namespace)),
            self.config.variables,
        )
        client = self.repository_client(provider, variables)
        logger.debug("Getting cluster template of {} (version={!r}, flavor={!r})", provider, version, options.flavor)
        return client.templates(options.list_variables_only).get(version, options.flavor, target_namespace)


def parse_provider_name(provider: str) -> tuple[str, str]:
    """
    Split a provider reference of the form `name[:version]`. The version is empty if not specified.
    """

    name, _, version = provider.partition(":")
    if not name:
        raise InvalidArgumentsError(f"invalid provider {provider!r}: the name must not be empty")
    if version and not is_version(version):
        raise InvalidArgumentsError(f"invalid provider {provider!r}: {version!r} is not a semantic version")
    return name, version


def template_options_to_variables(options: ClusterTemplateOptions, target_namespace: str) -> dict[str, str]:
    """
    Validate the template options and convert them into the well-known template variables.
    """

    variables: dict[str, str] = {}

    if not _is_dns1123_label(target_namespace):
        raise InvalidArgumentsError(f"invalid target namespace {target_namespace!r}: must be a DNS-1123 label")
    variables["NAMESPACE"] = target_namespace

    if options.cluster_name:
        if not _is_dns1123_label(options.cluster_name):
            raise InvalidArgumentsError(f"invalid cluster name {options.cluster_name!r}: must be a DNS-1123 label")
        variables["CLUSTER_NAME"] = options.cluster_name
    elif not options.list_variables_only:
        raise InvalidArgumentsError("please provide a cluster name")

    if options.kubernetes_version:
        if not is_version(options.kubernetes_version):
            raise InvalidArgumentsError(
                f"invalid Kubernetes version {options.kubernetes_version!r}: please use a semantic version number"
            )
        variables["KUBERNETES_VERSION"] = options.kubernetes_version

    control_plane = 1 if options.control_plane_machine_count is None else options.control_plane_machine_count
    if control_plane < 1:
        raise InvalidArgumentsError("invalid control plane machine count: please use a number greater or equal than 1")
    variables["CONTROL_PLANE_MACHINE_COUNT"] = str(control_plane)

    workers = 0 if options.worker_machine_count is None else options.worker_machine_count
    if workers < 0:
        raise InvalidArgumentsError("invalid worker machine count: please use a number greater or equal than 0")
    variables["WORKER_MACHINE_COUNT"] = str(workers)

    return variables


def _is_dns1123_label(value: str) -> bool:
    return len(value) <= 63 and _DNS1123_LABEL.match(value) is not None
