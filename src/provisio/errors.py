"""
Errors raised while resolving provider repositories and rendering their artifacts. Every error carries enough context
(provider label, version, artifact path) to be actionable without re-deriving it.
"""

from dataclasses import dataclass


class ProvisioError(Exception):
    """
    Base class for all errors raised by Provisio.
    """


@dataclass
class InvalidArgumentsError(ProvisioError, ValueError):
    """
    The caller supplied a required value that is empty or malformed.
    """

    message: str

    def __str__(self) -> str:
        return f"invalid arguments: {self.message}"


@dataclass
class UnsupportedSchemeError(ProvisioError):
    """
    The provider URL does not map to any repository backend.
    """

    url: str
    scheme: str

    def __str__(self) -> str:
        return f"invalid provider url {self.url!r}: there is no repository implementation for the {self.scheme!r} scheme"


@dataclass
class MalformedProviderURLError(ProvisioError):
    """
    The provider URL maps to a backend, but does not have the shape that backend expects.
    """

    url: str
    reason: str

    def __str__(self) -> str:
        return f"invalid provider url {self.url!r}: {self.reason}"


@dataclass
class NotFoundError(ProvisioError, LookupError):
    """
    The version or the path does not exist in the provider repository.
    """

    provider: str
    version: str
    path: str

    def __str__(self) -> str:
        if not self.path:
            return f"version {self.version!r} not found in the repository of provider {self.provider!r}"
        return f"{self.path!r} not found for version {self.version!r} in the repository of provider {self.provider!r}"


@dataclass
class RemoteError(ProvisioError):
    """
    A transport or API failure happened while talking to a remote repository.
    """

    provider: str
    version: str
    path: str
    message: str

    def __str__(self) -> str:
        target = "/".join(filter(None, [self.version, self.path])) or "<versions>"
        return f"failed to fetch {target!r} from the repository of provider {self.provider!r}: {self.message}"


@dataclass
class InvalidVersionError(ProvisioError, ValueError):
    """
    A version string could not be parsed as a semantic version.
    """

    version: str

    def __str__(self) -> str:
        return f"invalid version {self.version!r}: expected a semantic version such as 'v1.2.3'"


@dataclass
class MissingVariableError(ProvisioError):
    """
    Variable substitution required variables that are not defined in the variable source.
    """

    names: list[str]

    def __str__(self) -> str:
        return "value for variables [" + ", ".join(self.names) + "] is not set"


@dataclass
class ConversionError(ProvisioError):
    """
    The rendered YAML could not be converted into objects (or the reverse).
    """

    provider: str
    version: str
    path: str
    message: str

    def __str__(self) -> str:
        return (
            f"failed to parse {self.path!r} for version {self.version!r} of provider {self.provider!r}: {self.message}"
        )
