from typing import Any
from urllib.parse import quote, urlparse

from loguru import logger
import requests

from provisio.config.provider import Provider
from provisio.errors import MalformedProviderURLError, NotFoundError, RemoteError
from provisio.repository import Repository
from provisio.repository.versions import LATEST, is_version, latest_version, parse_version, sort_versions

GITHUB_DOMAIN = "github.com"
GITHUB_API_URL = "https://api.github.com"
RELEASES_PAGE_SIZE = 100


class GitHubRepository(Repository):
    """
    A repository hosted as release assets of a GitHub repository. The provider URL must have the form
    `https://github.com/<owner>/<repository>/releases/<version>/<components-file>`, where the version may be `latest`.

    Versions are the tags of the repository's (non-draft) releases. Files are the assets attached to a release.
    """

    def __init__(
        self,
        provider: Provider,
        session: requests.Session | None = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30,
    ) -> None:
        parsed = urlparse(provider.url)
        parts = parsed.path.strip("/").split("/")
        if len(parts) < 5 or parts[2] != "releases" or not all(parts):
            raise MalformedProviderURLError(
                provider.url,
                "expected a GitHub release URL of the form "
                "'https://github.com/<owner>/<repository>/releases/<version>/<components-file>'",
            )

        owner, repository, _, version, *rest = parts
        if version != LATEST and not is_version(version):
            raise MalformedProviderURLError(provider.url, f"{version!r} is neither {LATEST!r} nor a semantic version")

        self._provider = provider
        self._owner = owner
        self._repository = repository
        self._root_path = ""
        self._components_path = "/".join(rest)
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

        if version == LATEST:
            resolved = latest_version(self.get_versions())
            if resolved is None:
                raise NotFoundError(provider.manifest_label, LATEST, "")
            logger.debug("Resolved latest version of {} on GitHub to {}", provider, resolved)
            version = resolved

        self._default_version = version

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._owner}/{self._repository})"

    @property
    def _repo_api_url(self) -> str:
        return f"{self._api_url}/repos/{self._owner}/{self._repository}"

    def _get(self, url: str, version: str, path: str, **kwargs: Any) -> requests.Response:
        logger.trace("GET {}", url)
        try:
            return self._session.get(url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise RemoteError(self._provider.manifest_label, version, path, str(exc)) from exc

    def _error(self, response: requests.Response, version: str, path: str) -> RemoteError:
        return RemoteError(
            self._provider.manifest_label,
            version,
            path,
            f"GitHub responded with status code {response.status_code} for {response.url or 'request'}",
        )

    def _get_release(self, version: str) -> dict[str, Any]:
        response = self._get(f"{self._repo_api_url}/releases/tags/{quote(version)}", version, "")
        if response.status_code == 404:
            raise NotFoundError(self._provider.manifest_label, version, "")
        if response.status_code != 200:
            raise self._error(response, version, "")
        return response.json()

    # Repository

    def default_version(self) -> str:
        return self._default_version

    def root_path(self) -> str:
        return self._root_path

    def components_path(self) -> str:
        return self._components_path

    def get_file(self, version: str, path: str) -> bytes:
        parse_version(version)

        release = self._get_release(version)
        asset = next((a for a in release.get("assets", []) if a.get("name") == path), None)
        if asset is None:
            raise NotFoundError(self._provider.manifest_label, version, path)

        logger.debug("Downloading release asset {} of {}/{} {}", path, self._owner, self._repository, version)
        response = self._get(asset["url"], version, path, headers={"Accept": "application/octet-stream"})
        if response.status_code == 404:
            raise NotFoundError(self._provider.manifest_label, version, path)
        if response.status_code != 200:
            raise self._error(response, version, path)
        return response.content

    def get_versions(self) -> list[str]:
        tags: list[str] = []
        page = 1
        while True:
            response = self._get(
                f"{self._repo_api_url}/releases",
                "",
                "",
                params={"per_page": RELEASES_PAGE_SIZE, "page": page},
            )
            if response.status_code != 200:
                raise self._error(response, "", "")

            releases = response.json()
            for release in releases:
                if release.get("draft"):
                    continue
                tag = release.get("tag_name", "")
                if is_version(tag):
                    tags.append(tag)
                else:
                    logger.debug("Ignoring release tag {!r} of {} which is not a semantic version", tag, self)

            if len(releases) < RELEASES_PAGE_SIZE:
                break
            page += 1

        return sort_versions(tags)
