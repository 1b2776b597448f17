# fieldshape/structural/metrics.py

from collections import Counter
from typing import Any, Dict, List, Set

import networkx as nx

from fieldshape.utils.graph import build_field_graph, eager_subgraph


def find_recursive_fields(G: nx.MultiDiGraph) -> Set[int]:
    """Fields that can reach themselves (non-trivial SCC members and self-loops)."""
    recursive: Set[int] = set()
    for comp in nx.strongly_connected_components(G):
        if len(comp) > 1:
            recursive |= comp
    recursive |= {u for u, _v in nx.selfloop_edges(G)}
    return recursive


def compute_field_metrics(root: Any) -> Dict[str, Any]:
    """
    Describe a validated field schema.

    `eager_acyclic` is computed on the graph independently of the validator:
    when it is False, building the schema's initial value would not terminate.
    """
    G = build_field_graph(root)
    H = eager_subgraph(G)

    kinds = Counter(d["kind"] for _, d in G.nodes(data=True))
    n_eager = sum(1 for _u, _v, d in G.edges(data=True) if d["eager"])

    eager_acyclic = nx.is_directed_acyclic_graph(H)
    # longest chain of eager edges = nesting depth of the initial value
    max_eager_depth = nx.dag_longest_path_length(H) if eager_acyclic else None

    recursive = find_recursive_fields(G)
    recursive_paths: List[str] = sorted(G.nodes[n]["path"] or "<root>" for n in recursive)

    list_keys = sorted({
        d["list_key"] for _, d in G.nodes(data=True) if d["kind"] == "relationship"
    })

    return {
        "n_fields": G.number_of_nodes(),
        "n_edges": G.number_of_edges(),
        "n_eager_edges": n_eager,
        "n_lazy_edges": G.number_of_edges() - n_eager,
        "kinds": dict(sorted(kinds.items())),
        "recursive": bool(recursive),
        "recursive_fields": recursive_paths,
        "eager_acyclic": eager_acyclic,
        "max_eager_depth": max_eager_depth,
        "list_keys": list_keys,
    }
