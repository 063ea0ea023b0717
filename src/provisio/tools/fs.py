from pathlib import Path


def find_config_file(filename: str, cwd: Path | None = None, fallback: Path | None = None) -> Path | None:
    """
    Find a file with the given *filename* in the given *cwd* or any of its parent directories. If it cannot be found
    there, the *fallback* directory is checked last. Returns `None` if the file does not exist anywhere.
    """

    if cwd is None:
        cwd = Path.cwd()

    directories = [cwd] + list(cwd.parents)
    if fallback is not None:
        directories.append(fallback)

    for directory in directories:
        file = directory / filename
        if file.is_file():
            return file

    return None
