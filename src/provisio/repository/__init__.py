"""
This package implements access to provider repositories. A provider repository hosts, for one or more versions of a
provider, the YAML file for creating the provider components, the cluster templates and the provider metadata.
"""

from abc import ABC, abstractmethod


class Repository(ABC):
    """
    Base class for repository backends. A backend is aware of the provider versions it hosts, and all paths it
    accepts are relative to its [root_path].
    """

    @abstractmethod
    def default_version(self) -> str:
        """
        The version to use when the caller does not request one explicitly. If the repository URL points to `latest`,
        this is the newest release at the time the backend was created. Never returns the `latest` sentinel.
        """

    @abstractmethod
    def root_path(self) -> str:
        """
        The path inside the repository where the artifacts are stored. Derived from the repository URL.
        """

    @abstractmethod
    def components_path(self) -> str:
        """
        The path of the YAML file for creating provider components, relative to the version directory. Derived from
        the repository URL.
        """

    @abstractmethod
    def get_file(self, version: str, path: str) -> bytes:
        """
        Return a file for the given provider version.

        Raises:
            InvalidVersionError: If *version* is not a semantic version.
            NotFoundError: If the version or the file does not exist.
            RemoteError: If the repository could not be reached.
        """

    @abstractmethod
    def get_versions(self) -> list[str]:
        """
        Return the versions available in the repository, newest first.
        """
