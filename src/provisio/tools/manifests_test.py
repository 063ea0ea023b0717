import pytest
import yaml

from provisio.tools.manifests import from_objects, to_objects


def test__to_objects__skips_empty_documents_and_keeps_order() -> None:
    data = b"---\nkind: A\n---\n---\nkind: B\n"
    assert to_objects(data) == [{"kind": "A"}, {"kind": "B"}]


def test__to_objects__rejects_scalar_documents() -> None:
    with pytest.raises(ValueError):
        to_objects(b"just a string\n")


def test__to_objects__rejects_invalid_yaml() -> None:
    with pytest.raises(yaml.YAMLError):
        to_objects(b"key: [unterminated\n")


def test__from_objects__preserves_key_order() -> None:
    assert from_objects([{"kind": "B", "apiVersion": "v1"}]) == b"kind: B\napiVersion: v1\n"


@pytest.mark.parametrize("data", [b"kind: A\nmetadata: foo\n", b"kind: A\nmetadata: [1]\n"])
def test__to_objects__rejects_non_mapping_metadata(data: bytes) -> None:
    with pytest.raises(ValueError):
        to_objects(data)


def test__to_objects__accepts_null_metadata() -> None:
    assert to_objects(b"kind: A\nmetadata: ~\n") == [{"kind": "A", "metadata": None}]
