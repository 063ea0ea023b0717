from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from provisio.config.provider import Provider


@dataclass(frozen=True)
class LocalOverrides:
    """
    Local override files take precedence over the files in a provider's repository. This is useful during development
    of a provider, and as a workaround for problems with the official repositories.

    Override files are looked up at `<path>/<provider-label>/<version>/<file>`, where *path* is usually
    `~/.provisio/overrides`.
    """

    path: Path

    def path_for(self, provider: Provider, version: str, file: str) -> Path:
        """
        Return the path where the override for the given provider, version and file is expected.
        """

        return self.path / provider.manifest_label / version / file

    def get(self, provider: Provider, version: str, file: str) -> bytes | None:
        """
        Return the contents of the override file, or `None` if it does not exist.

        Raises:
            OSError: If the override exists but cannot be read.
        """

        override = self.path_for(provider, version, file)
        try:
            return override.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.debug("Failed to read local override '{}': {}", override, exc)
            raise
