"""
The rendered artifacts of a provider repository: cluster templates and provider components.

It is important to notice that the raw YAML read from the provider repositories goes through a set of processing
steps before it becomes an artifact:

1. All variables in the YAML are replaced with the corresponding values from the configuration.
2. All namespaced objects are moved into the target namespace.
"""

from dataclasses import dataclass, field

from provisio.config.provider import Provider, ProviderType
from provisio.tools.manifests import Manifest, Manifests, from_objects

CLUSTER_SCOPED_KINDS = {
    "APIService.apiregistration.k8s.io",
    "CertificateSigningRequest.certificates.k8s.io",
    "ClusterIssuer.cert-manager.io",
    "ClusterRole.rbac.authorization.k8s.io",
    "ClusterRoleBinding.rbac.authorization.k8s.io",
    "CustomResourceDefinition.apiextensions.k8s.io",
    "IngressClass.networking.k8s.io",
    "MutatingWebhookConfiguration.admissionregistration.k8s.io",
    "Namespace.v1",
    "Node.v1",
    "PersistentVolume.v1",
    "PriorityClass.scheduling.k8s.io",
    "RuntimeClass.node.k8s.io",
    "StorageClass.storage.k8s.io",
    "ValidatingWebhookConfiguration.admissionregistration.k8s.io",
}
""" Fully qualified kinds (`<kind>.<group>`, or `<kind>.v1` for the core group) of cluster-scoped objects. """


def is_namespace_resource(manifest: Manifest) -> bool:
    """
    Check if a manifest is a namespace resource.
    """

    return manifest.get("apiVersion") == "v1" and manifest.get("kind") == "Namespace"


def is_cluster_scoped_resource(manifest: Manifest) -> bool:
    """
    Check if a manifest is a cluster scoped resource.
    """

    fqn = str(manifest.get("kind") or "") + "." + str(manifest.get("apiVersion") or "").split("/")[0]
    return fqn in CLUSTER_SCOPED_KINDS


def fix_target_namespace(objects: Manifests, target_namespace: str) -> Manifests:
    """
    Return a copy of *objects* in which every namespaced object is placed in *target_namespace*. Cluster-scoped
    objects are returned unchanged.
    """

    result = Manifests([])
    for manifest in objects:
        if is_cluster_scoped_resource(manifest):
            result.append(manifest)
            continue
        metadata = {**(manifest.get("metadata") or {}), "namespace": target_namespace}
        result.append(Manifest({**manifest, "metadata": metadata}))
    return result


@dataclass(kw_only=True, frozen=True)
class Template:
    """
    A cluster template, i.e. the objects (Cluster, Machines, etc.) that define a workload cluster.

    A template rendered in "list variables only" mode has no objects and no target namespace.
    """

    variables: list[str]
    """ The variables required by the template, in order of first occurrence. """

    target_namespace: str = ""
    """ The namespace the template objects are placed in. """

    objects: Manifests = field(default_factory=lambda: Manifests([]))
    """ The template objects. """

    def yaml(self) -> bytes:
        """
        Return the template objects as a multi-document YAML stream.
        """

        return from_objects(self.objects)


@dataclass(kw_only=True, frozen=True)
class Components:
    """
    The components of a provider (CRDs, controller, RBAC rules, etc.) for a specific version.
    """

    provider: Provider
    version: str
    variables: list[str]
    """ The variables required by the components YAML, in order of first occurrence. """

    target_namespace: str
    """ The namespace the provider components are placed in. """

    watching_namespace: str = ""
    """ The namespace the provider controller watches; empty means all namespaces. """

    objects: Manifests = field(default_factory=lambda: Manifests([]))

    @property
    def name(self) -> str:
        return self.provider.name

    @property
    def type(self) -> ProviderType:
        return self.provider.type

    @property
    def manifest_label(self) -> str:
        return self.provider.manifest_label

    def yaml(self) -> bytes:
        return from_objects(self.objects)
