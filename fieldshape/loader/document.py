# fieldshape/loader/document.py
"""
Build field schemas from declarative documents.

A document names its fields and lets them refer to each other with
`{"ref": "<name>"}`, which is how recursive schemas are written without code:

    lists: [Post]
    root: tree
    fields:
      tree:
        kind: object
        fields:
          label: {kind: text, label: Label}
          post: {kind: relationship, listKey: Post}
          children: {kind: array, element: {ref: tree}}

`FieldRegistry` keeps one node per name, so every reference to a name
resolves to the same field object.
"""

from __future__ import annotations
import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional

from jsonschema import validate, ValidationError

from fieldshape.fields import api
from fieldshape.fields.nodes import Field, discriminant_key
from fieldshape.loader.schema import FIELD_DOCUMENT_SCHEMA
from fieldshape.structural.errors import SchemaDocumentError
from fieldshape.utils.io import PathLike, load_any, to_path
from fieldshape.utils.logger import get_logger

log = get_logger("loader.document")

_FORM_BUILDERS = {
    "text": lambda spec: api.text(spec.get("label", ""), spec.get("default", "")),
    "integer": lambda spec: api.integer(spec.get("label", ""), spec.get("default", 0)),
    "url": lambda spec: api.url(spec.get("label", ""), spec.get("default", "")),
    "checkbox": lambda spec: api.checkbox(spec.get("label", ""), spec.get("default", False)),
    "select": lambda spec: api.select(spec.get("label", ""), spec["options"], spec["default"]),
    "empty": lambda spec: api.empty(),
}


class FieldRegistry:
    """Arena of named field definitions, each built at most once."""

    def __init__(self, definitions: Mapping[str, Any]):
        self._definitions: Dict[str, Any] = dict(definitions)
        self._built: Dict[str, Field] = {}
        self._building: List[str] = []

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def names(self) -> List[str]:
        return list(self._definitions)

    def resolve(self, name: str) -> Field:
        """Return the field for `name`, building it on first use."""
        if name in self._built:
            return self._built[name]
        if name not in self._definitions:
            raise SchemaDocumentError(f'Unknown field reference "{name}"', name)
        if name in self._building:
            chain = " -> ".join(self._building[self._building.index(name):] + [name])
            raise SchemaDocumentError(
                f"The field references {chain} must be built eagerly and never end. "
                "Reference the field from an object field or a conditional value instead.",
                name,
            )
        self._building.append(name)
        try:
            field = self.build(self._definitions[name], name)
        finally:
            self._building.pop()
        self._built[name] = field
        log.debug("built field %r (%s)", name, field.kind)
        return field

    def accessor(self, name: str) -> Callable[[], Field]:
        return lambda: self.resolve(name)

    def check_references(self) -> None:
        """Fail early on references to names that are not defined."""
        for owner, spec in self._definitions.items():
            for ref in _iter_refs(spec):
                if ref not in self._definitions:
                    raise SchemaDocumentError(
                        f'The field "{owner}" references "{ref}" but no field with that name is defined',
                        owner,
                    )

    def build(self, spec: Mapping[str, Any], where: str) -> Field:
        if "ref" in spec:
            return self.resolve(spec["ref"])

        kind = spec["kind"]
        if kind in _FORM_BUILDERS:
            return _FORM_BUILDERS[kind](spec)
        if kind == "relationship":
            return api.relationship(spec["listKey"], spec.get("label", ""), bool(spec.get("many", False)))
        if kind == "object":
            return api.object_({
                key: self._child(child, f"{where}.{key}")
                for key, child in spec["fields"].items()
            })
        if kind == "array":
            return api.array(self.build(spec["element"], f"{where}.element"))
        if kind == "conditional":
            discriminant = self.build(spec["discriminant"], f"{where}.discriminant")
            return api.conditional(discriminant, {
                discriminant_key(key): self._child(child, f"{where}.{key}")
                for key, child in spec["values"].items()
            })
        raise SchemaDocumentError(f'Unknown field kind "{kind}" at "{where}"', where)

    def _child(self, spec: Mapping[str, Any], where: str) -> Callable[[], Field]:
        # children are built on first read and cached, so a named field exists
        # before an array below it asks for it as an element
        if "ref" in spec:
            return self.accessor(spec["ref"])
        return functools.cache(lambda: self.build(spec, where))


def _iter_refs(spec: Mapping[str, Any]) -> Iterator[str]:
    """References made from field positions only; leaf payloads such as
    `default` and `options` are plain values."""
    if "ref" in spec:
        yield spec["ref"]
        return
    kind = spec.get("kind")
    if kind == "object":
        children = spec["fields"].values()
    elif kind == "array":
        children = [spec["element"]]
    elif kind == "conditional":
        children = spec["values"].values()
    else:
        return
    for child in children:
        yield from _iter_refs(child)


@dataclass
class FieldDocument:
    root: Field
    lists: FrozenSet[str]
    registry: FieldRegistry
    source: Optional[Path] = None


def parse_document(data: Any, source: Optional[PathLike] = None) -> FieldDocument:
    """Check a loaded document against FIELD_DOCUMENT_SCHEMA and build its root field."""
    where = str(source) if source is not None else "<document>"
    try:
        validate(instance=data, schema=FIELD_DOCUMENT_SCHEMA)
    except ValidationError as e:
        raise SchemaDocumentError(f"{where}: {e.json_path}: {e.message}", e.json_path) from e

    registry = FieldRegistry(data["fields"])
    if data["root"] not in registry:
        raise SchemaDocumentError(f'{where}: root field "{data["root"]}" is not defined', "$.root")
    registry.check_references()

    root = registry.resolve(data["root"])
    lists = frozenset(data.get("lists", []))
    log.info("loaded %s: %d named fields, %d lists", where, len(registry.names()), len(lists))
    return FieldDocument(root=root, lists=lists, registry=registry,
                         source=to_path(source) if source is not None else None)


def load_document(path: PathLike) -> FieldDocument:
    """Load a JSON/YAML schema document from disk."""
    return parse_document(load_any(path), source=path)
