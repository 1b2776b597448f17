import pytest

from fieldshape.fields import api as fields
from fieldshape.fields.nodes import ConditionalField, ObjectField, discriminant_key
from fieldshape.structural.errors import FieldConfigurationError


def test_discriminant_key_stringifies_booleans_lowercase():
    assert discriminant_key(True) == "true"
    assert discriminant_key(False) == "false"
    assert discriminant_key("group") == "group"
    assert discriminant_key(3) == "3"


def test_object_wraps_eager_children_in_accessors():
    title = fields.text("Title")
    obj = fields.object_({"title": title, "lazy": lambda: title})
    assert isinstance(obj, ObjectField)
    assert list(obj.keys()) == ["title", "lazy"]
    assert obj.get("title") is title
    assert obj.get("lazy") is title


def test_object_rejects_non_field_values():
    with pytest.raises(FieldConfigurationError):
        fields.object_({"title": "not a field"})


def test_array_requires_field_element():
    with pytest.raises(FieldConfigurationError):
        fields.array(lambda: fields.text("x"))


def test_fields_compare_by_identity():
    a = fields.text("Same")
    b = fields.text("Same")
    assert a is not b
    assert a != b
    assert len({a, b}) == 2


def test_conditional_default_key_follows_discriminant():
    cond = fields.conditional(fields.checkbox("On", True), {"true": fields.empty(), "false": fields.empty()})
    assert isinstance(cond, ConditionalField)
    assert cond.default_key == "true"


def test_conditional_requires_form_discriminant():
    with pytest.raises(FieldConfigurationError):
        fields.conditional(fields.array(fields.text("x")), {"true": fields.empty()})


def test_select_default_must_be_an_option():
    with pytest.raises(FieldConfigurationError):
        fields.select("Kind", [{"label": "A", "value": "a"}], "z")
