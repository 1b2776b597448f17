# fieldshape/fields/defaults.py

from typing import Any

from fieldshape.fields.nodes import (
    ArrayField,
    ConditionalField,
    FormField,
    ObjectField,
    RelationshipField,
)


def initial_value(field: Any) -> Any:
    """
    Build the value an editor starts with for `field`.

    Only terminates for schemas accepted by `assert_valid_field`: objects and
    the default branch of a conditional are expanded eagerly, arrays start
    empty and other branches are never read.
    """
    if isinstance(field, FormField):
        return field.default_value
    if isinstance(field, RelationshipField):
        return [] if field.many else None
    if isinstance(field, ObjectField):
        return {key: initial_value(field.get(key)) for key in field.keys()}
    if isinstance(field, ArrayField):
        return []
    if isinstance(field, ConditionalField):
        return {
            "discriminant": field.discriminant.default_value,
            "value": initial_value(field.branch(field.default_key)),
        }
    raise TypeError(f"Not a field: {type(field).__name__}")
