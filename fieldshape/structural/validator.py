# fieldshape/structural/validator.py

from typing import AbstractSet, Any, Container, List, Set

from fieldshape.fields.nodes import (
    ArrayField,
    ConditionalField,
    FormField,
    ObjectField,
    RelationshipField,
    is_field,
)
from fieldshape.structural.errors import (
    CircularFieldError,
    FieldConfigurationError,
    UnknownListError,
    UnstableFieldError,
)
from fieldshape.utils.logger import get_logger

log = get_logger("structural.validator")

_NO_ANCESTORS: AbstractSet[Any] = frozenset()


def assert_valid_field(field: Any, known_lists: Container[str]) -> None:
    """
    Check that a field schema can be used to build an editor.

    Raises on the first problem found:
      - CircularFieldError: a field is needed to compute its own default value
      - UnstableFieldError: an object accessor returns different fields on two reads
      - UnknownListError: a relationship field names a list not in `known_lists`

    Recursion is allowed when it passes through an array element (default is
    an empty list) or through a conditional branch that is not the default one.
    """
    log.debug("validating %s field", getattr(field, "kind", type(field).__name__))
    _assert_valid(field, _NO_ANCESTORS, [], set(), known_lists)
    log.debug("field schema accepted")


def _assert_valid(
    field: Any,
    ancestors: AbstractSet[Any],
    path: List[str],
    seen: Set[Any],
    known_lists: Container[str],
) -> None:
    """
    ancestors: fields whose default value needs this one (reset at arrays and
               non-default conditional branches)
    seen:      every container entered during this walk; shared, only grows
    """
    if not is_field(field):
        raise FieldConfigurationError(
            f'The value at "{".".join(path)}" is not a field (got {type(field).__name__})',
            ".".join(path),
        )

    # must run before the seen check, or real cycles would look like revisits
    if field in ancestors:
        raise CircularFieldError(".".join(path))

    if isinstance(field, FormField):
        return

    if isinstance(field, RelationshipField):
        if field.list_key in known_lists:
            return
        raise UnknownListError(".".join(path), field.list_key)

    if field in seen:
        return
    seen.add(field)

    if isinstance(field, ObjectField):
        here = path + ["object"]
        live = ancestors | {field}
        for key in field.keys():
            accessor = field.accessor(key)
            child = accessor()
            if accessor() is not child:
                raise UnstableFieldError(".".join(here + [key]))
            _assert_valid(child, live, here + [key], seen, known_lists)
        return

    if isinstance(field, ArrayField):
        _assert_valid(field.element, _NO_ANCESTORS, path + ["array"], seen, known_lists)
        return

    if isinstance(field, ConditionalField):
        here = path + ["conditional"]
        default_key = field.default_key
        if default_key not in field.branches:
            raise FieldConfigurationError(
                f'The conditional field at "{".".join(here)}" has no value for '
                f'its default discriminant "{default_key}"',
                ".".join(here),
            )
        for key in field.keys():
            live = (ancestors | {field}) if key == default_key else _NO_ANCESTORS
            _assert_valid(field.branch(key), live, here + [key], seen, known_lists)
        return
