from urllib.parse import urlparse

from provisio.config.provider import Provider
from provisio.errors import MalformedProviderURLError, UnsupportedSchemeError
from provisio.repository import Repository
from provisio.repository.github import GITHUB_DOMAIN, GitHubRepository
from provisio.repository.local import LocalRepository


def repository_factory(provider: Provider) -> Repository:
    """
    Create the repository backend that corresponds to the provider's URL. `https://github.com/...` URLs are served
    from GitHub releases, `file://` URLs and plain paths from the local filesystem.

    Raises:
        UnsupportedSchemeError: If no backend supports the URL.
        MalformedProviderURLError: If the URL does not have the shape the backend expects.
    """

    try:
        url = urlparse(provider.url)
    except ValueError as exc:
        raise MalformedProviderURLError(provider.url, str(exc)) from exc

    if url.scheme == "https" and url.hostname == GITHUB_DOMAIN:
        return GitHubRepository(provider)

    if url.scheme in ("file", ""):
        return LocalRepository(provider)

    raise UnsupportedSchemeError(provider.url, url.scheme)
