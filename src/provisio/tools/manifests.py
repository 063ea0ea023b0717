"""
Conversion between raw YAML bytes and an ordered list of generic objects.
"""

from typing import Any, NewType

import yaml

Manifest = NewType("Manifest", dict[str, Any])
""" A generic Kubernetes-style object. """

Manifests = NewType("Manifests", list[Manifest])


def to_objects(data: bytes) -> Manifests:
    """
    Parse a (multi-document) YAML stream into a list of objects. Empty documents are skipped.

    Raises:
        yaml.YAMLError: If the data is not valid YAML.
        ValueError: If a document or its `metadata` is not a mapping.
    """

    manifests = Manifests([])
    for index, document in enumerate(yaml.safe_load_all(data.decode("utf-8"))):
        if document is None:
            continue
        if not isinstance(document, dict):
            raise ValueError(f"document #{index} is a {type(document).__name__}, expected a mapping")
        metadata = document.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValueError(f"metadata of document #{index} is a {type(metadata).__name__}, expected a mapping")
        manifests.append(Manifest(document))
    return manifests


def from_objects(objects: list[Manifest] | list[dict[str, Any]]) -> bytes:
    """
    Serialize a list of objects into a multi-document YAML stream.
    """

    return yaml.safe_dump_all(objects, sort_keys=False).encode("utf-8")
