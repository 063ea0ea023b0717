from pathlib import Path

import pytest

from provisio.config.provider import Provider, ProviderType
from provisio.config.variables import MappingVariables
from provisio.errors import ConversionError, InvalidArgumentsError, MissingVariableError, NotFoundError
from provisio.repository import Repository
from provisio.repository.client import RepositoryClient
from provisio.repository.local import LocalRepository
from provisio.repository.metadata import ReleaseSeries
from provisio.repository.overrides import LocalOverrides
from provisio.repository.versions import sort_versions

PROVIDER = Provider("foo", "url", ProviderType.INFRASTRUCTURE)

COMPONENTS = b"""\
apiVersion: v1
kind: Namespace
metadata:
  name: foo-system
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: foo-controller-manager
  namespace: foo-system
spec:
  template:
    spec:
      containers:
        - name: manager
          env:
            - name: FOO_CREDENTIALS
              value: ${FOO_CREDENTIALS}
"""

TEMPLATE = b"""\
apiVersion: cluster.x-k8s.io/v1beta1
kind: Cluster
metadata:
  name: ${CLUSTER_NAME}
  namespace: ${NAMESPACE}
---
apiVersion: v1
kind: Namespace
metadata:
  name: $NAMESPACE
"""


class FakeRepository(Repository):
    def __init__(self, default_version: str = "v1.0.0", components_path: str = "components.yaml") -> None:
        self._default_version = default_version
        self._components_path = components_path
        self.files: dict[tuple[str, str], bytes] = {}
        self.calls: list[tuple[str, str]] = []

    def with_file(self, version: str, path: str, content: bytes) -> "FakeRepository":
        self.files[(version, path)] = content
        return self

    def default_version(self) -> str:
        return self._default_version

    def root_path(self) -> str:
        return ""

    def components_path(self) -> str:
        return self._components_path

    def get_file(self, version: str, path: str) -> bytes:
        self.calls.append((version, path))
        try:
            return self.files[(version, path)]
        except KeyError:
            raise NotFoundError(PROVIDER.manifest_label, version, path)

    def get_versions(self) -> list[str]:
        return sort_versions({version for version, _ in self.files})


@pytest.fixture
def repository() -> FakeRepository:
    return (
        FakeRepository()
        .with_file("v1.0.0", "components.yaml", COMPONENTS)
        .with_file("v1.0.0", "cluster-template.yaml", TEMPLATE)
        .with_file("v1.0.0", "cluster-template-dev.yaml", b"kind: ConfigMap\nmetadata:\n  name: ${CLUSTER_NAME}\n")
        .with_file("v1.0.0", "metadata.yaml", b"releaseSeries:\n  - {major: 1, minor: 0, contract: v1beta1}\n")
        .with_file("v0.9.0", "components.yaml", COMPONENTS)
    )


@pytest.fixture
def overrides(tmp_path: Path) -> LocalOverrides:
    return LocalOverrides(tmp_path / "overrides")


def new_client(repository: Repository, overrides: LocalOverrides, **variables: str) -> RepositoryClient:
    return RepositoryClient(PROVIDER, MappingVariables(variables), overrides, repository=repository)


def test__RepositoryClient__get_versions(repository: FakeRepository, overrides: LocalOverrides) -> None:
    assert new_client(repository, overrides).get_versions() == ["v1.0.0", "v0.9.0"]


def test__TemplateClient__get(repository: FakeRepository, overrides: LocalOverrides) -> None:
    client = new_client(repository, overrides, CLUSTER_NAME="foo", NAMESPACE="bar")
    template = client.templates().get("", "", "bar")

    assert template.variables == ["CLUSTER_NAME", "NAMESPACE"]
    assert template.target_namespace == "bar"
    assert template.objects == [
        {
            "apiVersion": "cluster.x-k8s.io/v1beta1",
            "kind": "Cluster",
            "metadata": {"name": "foo", "namespace": "bar"},
        },
        {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "bar"}},
    ]
    assert repository.calls == [("v1.0.0", "cluster-template.yaml")]


def test__TemplateClient__get__namespace_is_normalized_after_substitution(
    repository: FakeRepository, overrides: LocalOverrides
) -> None:
    client = new_client(repository, overrides, CLUSTER_NAME="foo", NAMESPACE="ignored")
    template = client.templates().get("v1.0.0", "", "target")
    assert template.objects[0]["metadata"]["namespace"] == "target"
    assert template.objects[1]["metadata"] == {"name": "ignored"}


def test__TemplateClient__get__flavor(repository: FakeRepository, overrides: LocalOverrides) -> None:
    client = new_client(repository, overrides, CLUSTER_NAME="foo")
    template = client.templates().get("v1.0.0", "dev", "ns")
    assert template.objects == [{"kind": "ConfigMap", "metadata": {"name": "foo", "namespace": "ns"}}]


def test__TemplateClient__get__requires_target_namespace(
    repository: FakeRepository, overrides: LocalOverrides
) -> None:
    with pytest.raises(InvalidArgumentsError):
        new_client(repository, overrides).templates().get("v1.0.0", "", "")
    assert repository.calls == []


def test__TemplateClient__get__list_variables_only(repository: FakeRepository, overrides: LocalOverrides) -> None:
    template = new_client(repository, overrides).templates(list_variables_only=True).get("v1.0.0", "", "ns")
    assert template.variables == ["CLUSTER_NAME", "NAMESPACE"]
    assert template.objects == []
    assert template.target_namespace == ""


def test__TemplateClient__get__missing_variables(repository: FakeRepository, overrides: LocalOverrides) -> None:
    with pytest.raises(MissingVariableError) as excinfo:
        new_client(repository, overrides, CLUSTER_NAME="foo").templates().get("v1.0.0", "", "ns")
    assert excinfo.value.names == ["NAMESPACE"]


def test__TemplateClient__get__not_found(repository: FakeRepository, overrides: LocalOverrides) -> None:
    with pytest.raises(NotFoundError):
        new_client(repository, overrides).templates().get("v1.0.0", "prod", "ns")


def test__TemplateClient__get__invalid_yaml(repository: FakeRepository, overrides: LocalOverrides) -> None:
    repository.with_file("v1.0.0", "cluster-template-broken.yaml", b"kind: [${KIND}\n")
    with pytest.raises(ConversionError) as excinfo:
        new_client(repository, overrides, KIND="x").templates().get("v1.0.0", "broken", "ns")
    assert excinfo.value.path == "cluster-template-broken.yaml"
    assert excinfo.value.provider == "infrastructure-foo"


def test__TemplateClient__get__null_kind(repository: FakeRepository, overrides: LocalOverrides) -> None:
    repository.with_file("v1.0.0", "cluster-template-nullkind.yaml", b"kind: ~\napiVersion: v1\nmetadata: {name: x}\n")
    template = new_client(repository, overrides).templates().get("v1.0.0", "nullkind", "ns")
    assert template.objects == [{"kind": None, "apiVersion": "v1", "metadata": {"name": "x", "namespace": "ns"}}]


def test__TemplateClient__get__scalar_metadata(repository: FakeRepository, overrides: LocalOverrides) -> None:
    repository.with_file("v1.0.0", "cluster-template-scalar.yaml", b"kind: Cluster\nmetadata: cluster\n")
    with pytest.raises(ConversionError) as excinfo:
        new_client(repository, overrides).templates().get("v1.0.0", "scalar", "ns")
    assert excinfo.value.path == "cluster-template-scalar.yaml"


def test__TemplateClient__get__uses_override(
    repository: FakeRepository, overrides: LocalOverrides, tmp_path: Path
) -> None:
    override = overrides.path_for(PROVIDER, "v1.0.0", "cluster-template.yaml")
    override.parent.mkdir(parents=True)
    override.write_bytes(b"kind: Secret\nmetadata:\n  name: from-override\n")

    client = new_client(repository, overrides)
    template = client.templates().get("v1.0.0", "", "ns")

    assert template.objects == [{"kind": "Secret", "metadata": {"name": "from-override", "namespace": "ns"}}]
    assert repository.calls == []


def test__ComponentsClient__get(repository: FakeRepository, overrides: LocalOverrides) -> None:
    client = new_client(repository, overrides, FOO_CREDENTIALS="secret")
    components = client.components().get("", "foo-ns", "watched")

    assert components.version == "v1.0.0"
    assert components.name == "foo"
    assert components.type == ProviderType.INFRASTRUCTURE
    assert components.variables == ["FOO_CREDENTIALS"]
    assert components.target_namespace == "foo-ns"
    assert components.watching_namespace == "watched"
    assert components.objects[0] == {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "foo-system"}}
    deployment = components.objects[1]
    assert deployment["metadata"]["namespace"] == "foo-ns"
    assert deployment["spec"]["template"]["spec"]["containers"][0]["env"][0]["value"] == "secret"


def test__ComponentsClient__get__infers_target_namespace(
    repository: FakeRepository, overrides: LocalOverrides
) -> None:
    components = new_client(repository, overrides, FOO_CREDENTIALS="x").components().get("v0.9.0")
    assert components.version == "v0.9.0"
    assert components.target_namespace == "foo-system"


def test__ComponentsClient__get__cannot_infer_target_namespace(
    repository: FakeRepository, overrides: LocalOverrides
) -> None:
    repository.with_file("v2.0.0", "components.yaml", b"kind: ConfigMap\nmetadata:\n  name: x\n")
    with pytest.raises(InvalidArgumentsError):
        new_client(repository, overrides).components().get("v2.0.0")


def test__ComponentsClient__get__skip_variables(repository: FakeRepository, overrides: LocalOverrides) -> None:
    client = new_client(repository, overrides)
    with pytest.raises(MissingVariableError):
        client.components().get("v1.0.0", "ns")

    components = client.components(skip_variables=True).get("v1.0.0", "ns")
    assert components.variables == ["FOO_CREDENTIALS"]
    env = components.objects[1]["spec"]["template"]["spec"]["containers"][0]["env"][0]
    assert env["value"] == "${FOO_CREDENTIALS}"


def test__MetadataClient__get(repository: FakeRepository, overrides: LocalOverrides) -> None:
    metadata = new_client(repository, overrides).metadata().get()
    assert metadata.release_series == [ReleaseSeries(1, 0, "v1beta1")]


@pytest.mark.parametrize(
    "content",
    [
        b"releaseSeries: 42\n",
        b"releaseSeries: [1, 2]\n",
        b"releaseSeries:\n  - major: one\n    minor: 0\n    contract: v1beta1\n",
        b"---\nreleaseSeries: []\n---\nreleaseSeries: []\n",
    ],
)
def test__MetadataClient__get__malformed(
    repository: FakeRepository, overrides: LocalOverrides, content: bytes
) -> None:
    repository.with_file("v2.0.0", "metadata.yaml", content)
    with pytest.raises(ConversionError) as excinfo:
        new_client(repository, overrides).metadata().get("v2.0.0")
    assert excinfo.value.version == "v2.0.0"
    assert excinfo.value.path == "metadata.yaml"


def test__RepositoryClient__local_repository_end_to_end(tmp_path: Path, overrides: LocalOverrides) -> None:
    root = tmp_path / "repo"
    for version in ("v1.0.0", "v2.0.0"):
        (root / version).mkdir(parents=True)
        (root / version / "cluster-template.yaml").write_text("cluster: ${CLUSTER_NAME}\nnamespace: ${NAMESPACE}\n")

    provider = Provider("local", str(root), ProviderType.INFRASTRUCTURE)
    client = RepositoryClient(provider, MappingVariables({"CLUSTER_NAME": "foo", "NAMESPACE": "bar"}), overrides)

    assert isinstance(client.repository, LocalRepository)
    assert client.repository.default_version() == "v2.0.0"

    template = client.templates().get("", "", "bar")
    assert template.variables == ["CLUSTER_NAME", "NAMESPACE"]
    assert template.objects == [{"cluster": "foo", "namespace": "bar", "metadata": {"namespace": "bar"}}]
