from pathlib import Path
from urllib.parse import unquote, urlparse

from loguru import logger

from provisio.config.provider import Provider
from provisio.errors import MalformedProviderURLError, NotFoundError
from provisio.repository import Repository
from provisio.repository.versions import LATEST, is_version, latest_version, parse_version, sort_versions

DEFAULT_COMPONENTS_PATH = "components.yaml"
""" The components file name assumed when the provider URL points to the repository root directory. """


class LocalRepository(Repository):
    """
    A repository on the local filesystem. The provider URL is either an absolute path (optionally with the `file://`
    scheme) to a components file inside a version directory, i.e. `<root>/<version>/<components-file>`, or the path
    of the root directory itself. The version may be `latest`.

    The versions hosted by the repository are the subdirectories of the root directory that are named after a
    semantic version.
    """

    def __init__(self, provider: Provider) -> None:
        self._provider = provider
        self._root, self._components_path, version = _parse_local_url(provider.url)

        if not self._root.is_dir():
            raise MalformedProviderURLError(provider.url, f"repository root '{self._root}' is not a directory")

        if version == LATEST:
            resolved = latest_version(self.get_versions())
            if resolved is None:
                raise NotFoundError(provider.manifest_label, LATEST, "")
            logger.debug("Resolved latest version of {} in '{}' to {}", provider, self._root, resolved)
            version = resolved
        elif not (self._root / version).is_dir():
            raise NotFoundError(provider.manifest_label, version, "")

        self._default_version = version

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r})"

    # Repository

    def default_version(self) -> str:
        return self._default_version

    def root_path(self) -> str:
        return str(self._root)

    def components_path(self) -> str:
        return self._components_path

    def get_file(self, version: str, path: str) -> bytes:
        parse_version(version)
        file = self._root / version / path
        if not file.resolve().is_relative_to(self._root.resolve()):
            raise NotFoundError(self._provider.manifest_label, version, path)
        logger.trace("Reading '{}'", file)
        try:
            return file.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFoundError(self._provider.manifest_label, version, path) from exc

    def get_versions(self) -> list[str]:
        versions = []
        for item in self._root.iterdir():
            if not item.is_dir():
                continue
            if not is_version(item.name):
                logger.debug("Ignoring directory '{}' which is not named after a semantic version", item)
                continue
            versions.append(item.name)
        return sort_versions(versions)


def _parse_local_url(url: str) -> tuple[Path, str, str]:
    """
    Split a local provider URL into the repository root, the components path and the version.
    """

    parsed = urlparse(url)
    if parsed.netloc not in ("", "localhost"):
        raise MalformedProviderURLError(url, "file URLs must not specify a remote host")

    path = Path(unquote(parsed.path))
    if not path.is_absolute():
        raise MalformedProviderURLError(url, "the path must be absolute")

    if path.is_dir():
        return path, DEFAULT_COMPONENTS_PATH, LATEST

    if len(path.parts) < 4:
        raise MalformedProviderURLError(url, "expected a path of the form '<root>/<version>/<components-file>'")

    version = path.parent.name
    if version != LATEST and not is_version(version):
        raise MalformedProviderURLError(url, f"{version!r} is neither {LATEST!r} nor a semantic version")

    return path.parent.parent, path.name, version
