# fieldshape/fields/nodes.py
# Field node types. Nodes compare and hash by identity (eq=False), so two
# structurally equal fields built separately stay distinct in sets.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Tuple, Union

Accessor = Callable[[], "Field"]


def discriminant_key(value: Any) -> str:
    """Stringify a discriminant value the way branch keys are written."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(eq=False)
class FormField:
    """Leaf field edited through a form input."""
    input: str
    default_value: Any = None
    label: str = ""
    options: Tuple[Dict[str, Any], ...] = ()
    kind: str = field(default="form", init=False)


@dataclass(eq=False)
class RelationshipField:
    """Leaf field pointing at items of an external list."""
    list_key: str
    label: str = ""
    many: bool = False
    kind: str = field(default="relationship", init=False)


@dataclass(eq=False)
class ObjectField:
    """Container with one lazily-read child per key (key order is kept)."""
    accessors: Dict[str, Accessor]
    kind: str = field(default="object", init=False)

    def keys(self) -> Iterator[str]:
        return iter(self.accessors)

    def accessor(self, key: str) -> Accessor:
        return self.accessors[key]

    def get(self, key: str) -> "Field":
        return self.accessors[key]()


@dataclass(eq=False)
class ArrayField:
    """Container holding one element field; its default is an empty list."""
    element: "Field"
    kind: str = field(default="array", init=False)


@dataclass(eq=False)
class ConditionalField:
    """
    Container whose value is one of several branches, selected by a
    discriminant form field. The branch named by the discriminant's default
    value is the default branch.
    """
    discriminant: FormField
    branches: Dict[str, Accessor]
    kind: str = field(default="conditional", init=False)

    @property
    def default_key(self) -> str:
        return discriminant_key(self.discriminant.default_value)

    def keys(self) -> Iterator[str]:
        return iter(self.branches)

    def branch(self, key: str) -> "Field":
        return self.branches[key]()


Field = Union[FormField, RelationshipField, ObjectField, ArrayField, ConditionalField]

FIELD_TYPES = (FormField, RelationshipField, ObjectField, ArrayField, ConditionalField)


def is_field(value: Any) -> bool:
    return isinstance(value, FIELD_TYPES)
