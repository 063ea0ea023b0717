from dataclasses import dataclass
from enum import Enum
import re


class ProviderType(str, Enum):
    CORE = "CoreProvider"
    BOOTSTRAP = "BootstrapProvider"
    CONTROL_PLANE = "ControlPlaneProvider"
    INFRASTRUCTURE = "InfrastructureProvider"

    @property
    def order(self) -> int:
        """
        The position of the provider type when listing providers.
        """

        return list(ProviderType).index(self)


_LABEL_PREFIXES = {
    ProviderType.CORE: "",
    ProviderType.BOOTSTRAP: "bootstrap-",
    ProviderType.CONTROL_PLANE: "control-plane-",
    ProviderType.INFRASTRUCTURE: "infrastructure-",
}


@dataclass(frozen=True)
class Provider:
    """
    Identity of a provider: a named, typed source of installable components and cluster templates.
    """

    name: str
    """ The name of the provider. Unique per provider type within a configuration. """

    url: str
    """ The location of the provider's repository. """

    type: ProviderType
    """ The type of the provider. """

    @property
    def manifest_label(self) -> str:
        """
        A canonical, filesystem-safe rendering of the provider's name and type, e.g. `infrastructure-aws`. This is the
        directory name used for the provider in local override trees.
        """

        label = _LABEL_PREFIXES[self.type] + self.name
        return re.sub(r"[^a-z0-9.-]", "-", label.lower())

    def __str__(self) -> str:
        return self.manifest_label


def parse_provider_type(value: str) -> ProviderType:
    """
    Parse a provider type from either its canonical value (e.g. `InfrastructureProvider`) or its short form
    (e.g. `infrastructure`, `control-plane`).
    """

    normalized = value.strip().lower().replace("_", "-")
    for provider_type in ProviderType:
        short = _LABEL_PREFIXES[provider_type].rstrip("-") or "core"
        if normalized in (provider_type.value.lower(), short, short.replace("-", "")):
            return provider_type
    raise ValueError(f"Unsupported provider type: {value!r}")
