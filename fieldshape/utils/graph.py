# fieldshape/utils/graph.py
from typing import Any, Dict, Iterator, Tuple
import networkx as nx

from fieldshape.fields.nodes import (
    ArrayField,
    ConditionalField,
    ObjectField,
    RelationshipField,
    FormField,
)


def iter_children(field: Any) -> Iterator[Tuple[str, Any, bool]]:
    """
    Yield (label, child, eager) for each child slot of a field.
    `eager` is True when the child's default value is needed to build the
    parent's default value.
    """
    if isinstance(field, ObjectField):
        for key in field.keys():
            yield key, field.get(key), True
    elif isinstance(field, ArrayField):
        yield "element", field.element, False
    elif isinstance(field, ConditionalField):
        default_key = field.default_key
        for key in field.keys():
            yield key, field.branch(key), key == default_key


def _node_attrs(field: Any) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {"kind": field.kind, "field": field}
    if isinstance(field, FormField):
        attrs["input"] = field.input
        attrs["label"] = field.label
    elif isinstance(field, RelationshipField):
        attrs["list_key"] = field.list_key
        attrs["label"] = field.label
    return attrs


def build_field_graph(root: Any) -> nx.MultiDiGraph:
    """
    Export a field schema as a graph with one node per field identity.

    Nodes are numbered in discovery order (root is 0) and carry `kind`,
    `field` and `path` (first path the field was found at). Edges carry
    `label` (object key, branch key or "element") and `eager`.

    Every accessor is read once, so only call this on a validated schema.
    """
    G = nx.MultiDiGraph(root=0)
    index: Dict[Any, int] = {}  # fields hash by identity

    def node_for(field: Any, path: str) -> Tuple[int, bool]:
        if field in index:
            return index[field], False
        nid = len(index)
        index[field] = nid
        G.add_node(nid, path=path, **_node_attrs(field))
        return nid, True

    node_for(root, "")
    stack = [root]
    while stack:
        field = stack.pop()
        src = index[field]
        base = G.nodes[src]["path"]
        for label, child, eager in iter_children(field):
            path = f"{base}.{label}" if base else label
            dst, is_new = node_for(child, path)
            G.add_edge(src, dst, label=label, eager=eager)
            if is_new:
                stack.append(child)
    return G


def eager_subgraph(G: nx.MultiDiGraph) -> nx.DiGraph:
    """Collapse to a simple DiGraph of eager edges only."""
    H = nx.DiGraph()
    H.add_nodes_from(G.nodes(data=True))
    H.add_edges_from((u, v) for u, v, d in G.edges(data=True) if d.get("eager"))
    return H
