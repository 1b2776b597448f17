import json

import pytest

from fieldshape.fields.nodes import ArrayField, ObjectField
from fieldshape.loader.document import FieldRegistry, load_document, parse_document
from fieldshape.structural.errors import FieldConfigurationError, SchemaDocumentError
from fieldshape.structural.validator import assert_valid_field

TREE_YAML = """
lists: [Post]
root: tree
fields:
  tree:
    kind: object
    fields:
      label: {kind: text, label: Label, default: node}
      post: {kind: relationship, listKey: Post}
      children: {kind: array, element: {ref: tree}}
"""


def test_load_yaml_document(tmp_path):
    fp = tmp_path / "tree.yaml"
    fp.write_text(TREE_YAML, encoding="utf-8")

    doc = load_document(fp)
    assert isinstance(doc.root, ObjectField)
    assert doc.lists == frozenset({"Post"})
    assert doc.source == fp

    children = doc.root.get("children")
    assert isinstance(children, ArrayField)
    # the element is the named field itself
    assert children.element is doc.root
    assert_valid_field(doc.root, doc.lists)


def test_load_json_document(tmp_path):
    fp = tmp_path / "doc.json"
    fp.write_text(json.dumps({
        "root": "doc",
        "fields": {"doc": {"kind": "object", "fields": {"title": {"kind": "text"}}}},
    }), encoding="utf-8")
    doc = load_document(fp)
    assert doc.lists == frozenset()
    assert doc.root.get("title").input == "text"


def test_references_resolve_to_one_field():
    registry = FieldRegistry({
        "a": {"kind": "object", "fields": {"x": {"ref": "b"}, "y": {"ref": "b"}}},
        "b": {"kind": "text"},
    })
    a = registry.resolve("a")
    assert a.get("x") is a.get("y") is registry.resolve("b")
    assert a.get("x") is a.get("x")


def test_inline_children_are_stable():
    registry = FieldRegistry({"a": {"kind": "object", "fields": {"x": {"kind": "text"}}}})
    a = registry.resolve("a")
    assert a.get("x") is a.get("x")


def test_conditional_branch_keys_are_stringified():
    doc = parse_document({
        "root": "c",
        "fields": {
            "c": {
                "kind": "conditional",
                "discriminant": {"kind": "checkbox", "default": True},
                "values": {"true": {"kind": "text"}, "false": {"ref": "c"}},
            }
        },
    })
    assert doc.root.default_key == "true"
    assert_valid_field(doc.root, doc.lists)


def test_document_shape_is_checked():
    with pytest.raises(SchemaDocumentError) as exc:
        parse_document({"root": "a", "fields": {"a": {"kind": "nope"}}})
    assert "$.fields.a" in str(exc.value)


def test_root_must_be_defined():
    with pytest.raises(SchemaDocumentError):
        parse_document({"root": "missing", "fields": {"a": {"kind": "text"}}})


def test_unknown_reference():
    with pytest.raises(SchemaDocumentError) as exc:
        parse_document({"root": "a", "fields": {"a": {"kind": "array", "element": {"ref": "b"}}}})
    assert '"b"' in str(exc.value)


def test_eager_reference_loop():
    with pytest.raises(SchemaDocumentError) as exc:
        parse_document({"root": "a", "fields": {"a": {"ref": "b"}, "b": {"ref": "a"}}})
    assert "a -> b -> a" in str(exc.value)


def test_conditional_default_must_name_a_value():
    with pytest.raises(FieldConfigurationError):
        parse_document({
            "root": "c",
            "fields": {
                "c": {
                    "kind": "conditional",
                    "discriminant": {"kind": "checkbox"},
                    "values": {"true": {"kind": "text"}},
                }
            },
        })


def test_unsupported_extension(tmp_path):
    fp = tmp_path / "doc.txt"
    fp.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_document(fp)


def test_ref_shaped_defaults_are_plain_values():
    doc = parse_document({
        "root": "a",
        "fields": {
            "a": {"kind": "object", "fields": {"t": {"kind": "text", "default": {"ref": "x"}}}},
        },
    })
    assert doc.root.get("t").default_value == {"ref": "x"}


def test_unknown_reference_inside_conditional_value():
    with pytest.raises(SchemaDocumentError) as exc:
        parse_document({
            "root": "c",
            "fields": {
                "c": {
                    "kind": "conditional",
                    "discriminant": {"kind": "checkbox"},
                    "values": {"false": {"kind": "empty"}, "true": {"ref": "missing"}},
                }
            },
        })
    assert '"missing"' in str(exc.value)
