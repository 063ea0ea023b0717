from dataclasses import dataclass, field
from typing import Annotated, Any

from databind.core import Alias

from provisio.repository.versions import parse_version

METADATA_FILE = "metadata.yaml"
""" The name of the file with the provider metadata in every version of a provider repository. """


@dataclass
class ReleaseSeries:
    """
    Maps a minor release series of the provider to the API contract it implements.
    """

    major: int
    minor: int
    contract: str
    """ The API contract the release series abides by, e.g. `v1beta1`. """


@dataclass
class Metadata:
    """
    Provider metadata as it is stored in the `metadata.yaml` file of a provider repository.
    """

    release_series: Annotated[list[ReleaseSeries], Alias("releaseSeries")] = field(default_factory=list)

    @staticmethod
    def load(data: dict[str, Any], filename: str | None = None) -> "Metadata":
        """
        Deserialize metadata from its YAML representation. The `apiVersion` and `kind` fields are ignored.
        """

        from databind.json import load as deser

        data = {k: v for k, v in data.items() if k not in ("apiVersion", "kind")}
        return deser(data, Metadata, filename=filename)

    def get_release_series_for_version(self, version: str) -> ReleaseSeries | None:
        """
        Return the release series that the given version belongs to, or `None` if the version is not part of any
        release series.
        """

        parsed = parse_version(version)
        for series in self.release_series:
            if series.major == parsed.major and series.minor == parsed.minor:
                return series
        return None
