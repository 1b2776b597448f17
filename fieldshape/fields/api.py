# fieldshape/fields/api.py
"""
Constructors for field schemas.

Children of `object_` and `conditional` may be given either as field nodes or
as zero-argument callables returning a field node. Callables are read lazily,
which is how recursive schemas are written:

    node = object_({"label": text("Label"), "children": lambda: children})
    children = array(node)
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Mapping, Union

from fieldshape.fields.nodes import (
    Accessor,
    ArrayField,
    ConditionalField,
    Field,
    FormField,
    ObjectField,
    RelationshipField,
    discriminant_key,
    is_field,
)
from fieldshape.structural.errors import FieldConfigurationError

FieldOrAccessor = Union[Field, Callable[[], Field]]


def _as_accessor(name: str, value: FieldOrAccessor) -> Accessor:
    if is_field(value):
        return lambda: value
    if callable(value):
        return value
    raise FieldConfigurationError(
        f'"{name}" must be a field or a callable returning a field, got {type(value).__name__}'
    )


# ---------- Form (leaf) fields ----------

def text(label: str, default_value: str = "") -> FormField:
    return FormField(input="text", default_value=default_value, label=label)


def integer(label: str, default_value: int = 0) -> FormField:
    return FormField(input="integer", default_value=default_value, label=label)


def url(label: str, default_value: str = "") -> FormField:
    return FormField(input="url", default_value=default_value, label=label)


def checkbox(label: str, default_value: bool = False) -> FormField:
    return FormField(input="checkbox", default_value=bool(default_value), label=label)


def select(label: str, options: Iterable[Mapping[str, Any]], default_value: Any) -> FormField:
    """Single choice among `options` ({"label": ..., "value": ...} mappings)."""
    opts = tuple(dict(o) for o in options)
    values = [o.get("value") for o in opts]
    if default_value not in values:
        raise FieldConfigurationError(
            f'A defaultValue of "{default_value}" was provided to a select field '
            f"but it does not match the value of one of the options provided: {values}"
        )
    return FormField(input="select", default_value=default_value, label=label, options=opts)


def empty() -> FormField:
    """A field with no value; useful as a conditional branch."""
    return FormField(input="empty", default_value=None)


# ---------- Relationship (leaf) field ----------

def relationship(list_key: str, label: str = "", many: bool = False) -> RelationshipField:
    return RelationshipField(list_key=list_key, label=label, many=many)


# ---------- Containers ----------

def object_(fields: Mapping[str, FieldOrAccessor]) -> ObjectField:
    # trailing underscore keeps the builtin `object` usable
    accessors: Dict[str, Accessor] = {k: _as_accessor(k, v) for k, v in fields.items()}
    return ObjectField(accessors=accessors)


def array(element: Field) -> ArrayField:
    if not is_field(element):
        raise FieldConfigurationError(
            f"An array element must be a field, got {type(element).__name__}"
        )
    return ArrayField(element=element)


def conditional(discriminant: FormField, values: Mapping[str, FieldOrAccessor]) -> ConditionalField:
    """
    Build a conditional field. `values` maps each stringified discriminant
    value ("true"/"false" for checkboxes) to the field used for that value.
    The discriminant's default value must name one of the keys.
    """
    if not isinstance(discriminant, FormField):
        raise FieldConfigurationError("The discriminant of a conditional field must be a form field")
    branches: Dict[str, Accessor] = {k: _as_accessor(k, v) for k, v in values.items()}
    default_key = discriminant_key(discriminant.default_value)
    if default_key not in branches:
        raise FieldConfigurationError(
            f'The default value "{default_key}" of the discriminant does not name a value '
            f"of the conditional field; expected one of {list(branches)}"
        )
    return ConditionalField(discriminant=discriminant, branches=branches)
