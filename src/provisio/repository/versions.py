"""
Parsing and ordering of semantic version tags such as `v1.2.3` or `v1.3.0-rc.1`.
"""

from collections.abc import Iterable

from semver import Version

from provisio.errors import InvalidVersionError

LATEST = "latest"
""" Sentinel that resolves to the newest release available in a repository. """


def parse_version(version: str) -> Version:
    """
    Parse a semantic version tag. The `v` prefix is optional.

    Raises:
        InvalidVersionError: If the tag is not a semantic version.
    """

    try:
        return Version.parse(version[1:] if version.startswith("v") else version)
    except (ValueError, TypeError) as exc:
        raise InvalidVersionError(version) from exc


def is_version(version: str) -> bool:
    try:
        parse_version(version)
    except InvalidVersionError:
        return False
    return True


def sort_versions(versions: Iterable[str]) -> list[str]:
    """
    Return the distinct, valid versions in descending order of semantic version precedence. Pre-releases rank lower
    than the corresponding release. Invalid versions are dropped.
    """

    parsed = {v: parse_version(v) for v in versions if is_version(v)}
    return sorted(parsed, key=lambda v: parsed[v], reverse=True)


def latest_version(versions: Iterable[str]) -> str | None:
    """
    Return the newest release among *versions*. Pre-releases are only considered if there is no release at all.
    Returns `None` if there are no valid versions.
    """

    ordered = sort_versions(versions)
    releases = [v for v in ordered if parse_version(v).prerelease is None]
    candidates = releases or ordered
    return candidates[0] if candidates else None
