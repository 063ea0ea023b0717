from dataclasses import dataclass, field

from loguru import logger
import yaml

from provisio.config.provider import Provider
from provisio.config.variables import VariablesGetter
from provisio.errors import ConversionError, InvalidArgumentsError
from provisio.repository import Repository
from provisio.repository.artifacts import Components, Template, fix_target_namespace, is_namespace_resource
from provisio.repository.factory import repository_factory
from provisio.repository.metadata import METADATA_FILE, Metadata
from provisio.repository.overrides import LocalOverrides
from provisio.repository.processor import SimpleProcessor, YamlProcessor
from provisio.repository.variables import inspect_variables, replace_variables
from provisio.tools.manifests import Manifests, to_objects


class RepositoryClient:
    """
    Client for the repository of a single provider. The repository backend is selected from the provider URL when
    the client is created, unless one is passed explicitly.

    Provider repositories are expected to contain three kinds of YAML files:

    - the YAML for creating the provider components (CRDs, controller, RBAC, etc.),
    - the YAML for generating workload cluster templates (infrastructure providers only),
    - the provider metadata.
    """

    def __init__(
        self,
        provider: Provider,
        variables: VariablesGetter,
        overrides: LocalOverrides,
        repository: Repository | None = None,
    ) -> None:
        self.provider = provider
        self.variables = variables
        self.overrides = overrides
        self.repository = repository if repository is not None else repository_factory(provider)
        logger.debug("Using {!r} for provider {}", self.repository, provider)

    def get_versions(self) -> list[str]:
        return self.repository.get_versions()

    def components(self, skip_variables: bool = False) -> "ComponentsClient":
        return ComponentsClient(self, skip_variables)

    def templates(
        self,
        list_variables_only: bool = False,
        processor: YamlProcessor | None = None,
    ) -> "TemplateClient":
        return TemplateClient(self, list_variables_only, processor or SimpleProcessor())

    def metadata(self) -> "MetadataClient":
        return MetadataClient(self)

    def fetch(self, version: str, path: str) -> bytes:
        """
        Read a file from the provider repository, unless a local override for it exists.
        """

        content = self.overrides.get(self.provider, version, path)
        if content is not None:
            logger.info("Using override for {} of provider {} version {}", path, self.provider, version)
            return content

        logger.debug("Fetching {} of provider {} version {}", path, self.provider, version)
        return self.repository.get_file(version, path)

    def to_objects(self, version: str, path: str, data: bytes) -> Manifests:
        """
        Convert rendered YAML into objects, reporting failures with the provider, version and path.
        """

        try:
            return to_objects(data)
        except (yaml.YAMLError, ValueError) as exc:
            raise ConversionError(self.provider.manifest_label, version, path, str(exc)) from exc

    def inspect_variables(self, version: str, path: str, raw: bytes) -> list[str]:
        try:
            return inspect_variables(raw)
        except UnicodeDecodeError as exc:
            raise ConversionError(self.provider.manifest_label, version, path, str(exc)) from exc


@dataclass
class ComponentsClient:
    """
    Access to the YAML for creating the provider components.
    """

    client: RepositoryClient
    skip_variables: bool = False
    """ Keep placeholders of undefined variables instead of failing. """

    def get(self, version: str = "", target_namespace: str = "", watching_namespace: str = "") -> Components:
        """
        Return the rendered components of the provider.

        Args:
            version: The provider version. If empty, the repository's default version is used.
            target_namespace: The namespace to place the components in. If empty, the namespace is taken from the
                single `Namespace` object defined in the components YAML.
            watching_namespace: The namespace the provider controller should watch; empty means all namespaces.
        """

        client = self.client
        if not version:
            version = client.repository.default_version()

        path = client.repository.components_path()
        raw = client.fetch(version, path)

        variables = client.inspect_variables(version, path, raw)
        processed = replace_variables(raw, variables, client.variables, self.skip_variables)
        objects = client.to_objects(version, path, processed)

        if not target_namespace:
            target_namespace = _inspect_target_namespace(client.provider, objects)
            logger.debug("Using namespace {} defined in the components of {}", target_namespace, client.provider)

        return Components(
            provider=client.provider,
            version=version,
            variables=variables,
            target_namespace=target_namespace,
            watching_namespace=watching_namespace,
            objects=fix_target_namespace(objects, target_namespace),
        )


@dataclass
class TemplateClient:
    """
    Access to the cluster templates of the provider.
    """

    client: RepositoryClient
    list_variables_only: bool = False
    """ Only discover the variables of a template; do not substitute them or produce objects. """

    processor: YamlProcessor = field(default_factory=SimpleProcessor)

    def get(self, version: str = "", flavor: str = "", target_namespace: str = "") -> Template:
        """
        Return the cluster template for the given flavor. Templates are named `cluster-template[-<flavor>].yaml`.

        Args:
            version: The provider version. If empty, the repository's default version is used.
            flavor: The template flavor; empty for the default template.
            target_namespace: The namespace to place the template objects in. Required.
        """

        if not target_namespace:
            raise InvalidArgumentsError("please provide a target namespace")

        client = self.client
        if not version:
            version = client.repository.default_version()

        name = self.processor.artifact_name(version, flavor)
        raw = client.fetch(version, name)

        try:
            variables = self.processor.get_variables(raw)
        except UnicodeDecodeError as exc:
            raise ConversionError(client.provider.manifest_label, version, name, str(exc)) from exc

        if self.list_variables_only:
            return Template(variables=variables)

        processed = self.processor.process(raw, client.variables)
        objects = client.to_objects(version, name, processed)

        # Namespaced objects must be in a single namespace; this has to happen after variable substitution, since the
        # namespace may itself be a variable.
        return Template(
            variables=variables,
            target_namespace=target_namespace,
            objects=fix_target_namespace(objects, target_namespace),
        )


@dataclass
class MetadataClient:
    """
    Access to the provider metadata.
    """

    client: RepositoryClient

    def get(self, version: str = "") -> Metadata:
        from databind.core import ConversionError as DeserializationError

        client = self.client
        if not version:
            version = client.repository.default_version()

        objects = client.to_objects(version, METADATA_FILE, client.fetch(version, METADATA_FILE))
        if len(objects) != 1:
            raise ConversionError(
                client.provider.manifest_label, version, METADATA_FILE, f"expected 1 document, got {len(objects)}"
            )

        try:
            return Metadata.load(objects[0], filename=f"{client.provider}/{version}/{METADATA_FILE}")
        except (DeserializationError, TypeError, ValueError) as exc:
            raise ConversionError(client.provider.manifest_label, version, METADATA_FILE, str(exc)) from exc


def _inspect_target_namespace(provider: Provider, objects: Manifests) -> str:
    namespaces = [(m.get("metadata") or {}).get("name", "") for m in objects if is_namespace_resource(m)]
    if len(namespaces) != 1:
        raise InvalidArgumentsError(
            f"unable to determine the target namespace of provider {provider}: the components define "
            f"{len(namespaces)} namespaces, please provide a target namespace"
        )
    return namespaces[0]
