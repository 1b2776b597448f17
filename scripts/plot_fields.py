#!/usr/bin/env python3
# scripts/plot_fields.py

from __future__ import annotations

from pathlib import Path
import sys
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from typing import Any, Dict, List, Optional, Tuple
import typer
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch
from matplotlib.lines import Line2D
import networkx as nx

from fieldshape.loader.document import load_document
from fieldshape.structural.validator import assert_valid_field
from fieldshape.utils.graph import build_field_graph
from fieldshape.utils.io import save_fig
from fieldshape.utils.logger import log


app = typer.Typer(help="Plot the field graph of a schema document; eager edges solid, lazy edges dashed.")

# ---------- color/theme ----------
KIND_COLORS = {
    "object": "#5B8FD9",
    "array": "#2AA876",
    "conditional": "#F4A259",
    "relationship": "#E4572E",
    "form": "#CFCFCF",
}
EDGE_EAGER = "#3C3C3C"
EDGE_LAZY = "#888888"
FONT_FAMILY = "DejaVu Sans"  # widely available
BOX_W, BOX_H = 0.30, 0.14


def _node_text(d: Dict[str, Any]) -> str:
    if d["kind"] == "form":
        return d.get("input", "form")
    if d["kind"] == "relationship":
        return f"rel:{d.get('list_key')}"
    return d["kind"]


def _collapse(G: nx.MultiDiGraph) -> nx.DiGraph:
    """Merge parallel edges; an edge is eager if any merged edge is."""
    H = nx.DiGraph()
    H.add_nodes_from(G.nodes(data=True))
    for u, v, d in G.edges(data=True):
        if H.has_edge(u, v):
            H[u][v]["labels"].append(d["label"])
            H[u][v]["eager"] = H[u][v]["eager"] or d["eager"]
        else:
            H.add_edge(u, v, labels=[d["label"]], eager=d["eager"])
    return H


def _depth_layout(H: nx.DiGraph, root: int, layer_gap: float, row_gap: float) -> Dict[Any, Tuple[float, float]]:
    """Layer by shortest distance from the root (the graph may be cyclic)."""
    depth = nx.single_source_shortest_path_length(H, root)
    layers: Dict[int, List[Any]] = {}
    for n, L in depth.items():
        layers.setdefault(L, []).append(n)

    pos: Dict[Any, Tuple[float, float]] = {}
    for L, nodes in layers.items():
        for i, n in enumerate(sorted(nodes)):
            pos[n] = (L * layer_gap, -(i * row_gap))
    return pos


def _draw_rounded_node(ax, xy, text, facecolor, edgecolor="#3c3c3c"):
    x, y = xy
    box = FancyBboxPatch(
        (x - BOX_W / 2, y - BOX_H / 2), BOX_W, BOX_H,
        boxstyle="round,pad=0.03,rounding_size=0.02",
        linewidth=1.2, edgecolor=edgecolor, facecolor=facecolor, zorder=2
    )
    ax.add_patch(box)
    ax.text(x, y, text, ha="center", va="center", fontsize=9, zorder=3)


@app.command()
def plot(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, help="Path to a field schema document"),
    out: Path = typer.Option(Path("experiments/results/fields.png"), "--out", "-o", help="Output image path"),
    title: Optional[str] = typer.Option(None, "--title", help="Figure title"),
    show_legend: bool = typer.Option(True, "--legend/--no-legend", help="Show legend"),
):
    """Plot a validated schema document."""
    matplotlib.rcParams["font.family"] = FONT_FAMILY

    doc = load_document(input)
    assert_valid_field(doc.root, doc.lists)
    log.info(f"Loaded and validated: {input}")

    H = _collapse(build_field_graph(doc.root))
    log.info(f"Field graph: {H.number_of_nodes()} fields, {H.number_of_edges()} edges")

    pos = _depth_layout(H, 0, layer_gap=3.0 * BOX_W, row_gap=2.4 * BOX_H)
    log.debug(f"Positions: {pos}")

    fig = plt.figure(figsize=(8.5, 6.2), dpi=180)
    ax = plt.gca()
    ax.set_axis_off()
    xs = [x for x, y in pos.values()]
    ys = [y for x, y in pos.values()]
    ax.set_xlim(min(xs) - BOX_W, max(xs) + BOX_W)
    ax.set_ylim(min(ys) - BOX_H, max(ys) + BOX_H)
    ax.set_aspect("equal")

    eager = [(u, v) for u, v, d in H.edges(data=True) if d["eager"]]
    lazy = [(u, v) for u, v, d in H.edges(data=True) if not d["eager"]]
    for edgelist, color, style in ((eager, EDGE_EAGER, "solid"), (lazy, EDGE_LAZY, "dashed")):
        if not edgelist:
            continue
        nx.draw_networkx_edges(
            H, pos, ax=ax, edgelist=edgelist,
            width=1.4, alpha=0.8, arrows=True, arrowsize=16,
            edge_color=color, style=style,
            # back edges (recursion) curve so they stay visible
            connectionstyle="arc3,rad=0.25",
            min_source_margin=12, min_target_margin=14,
        )
    nx.draw_networkx_edge_labels(
        H, pos, ax=ax, font_size=7,
        edge_labels={(u, v): ",".join(d["labels"]) for u, v, d in H.edges(data=True)},
    )

    for n, (x, y) in pos.items():
        d = H.nodes[n]
        _draw_rounded_node(ax, (x, y), _node_text(d), facecolor=KIND_COLORS.get(d["kind"], "#FFFFFF"))

    ax.set_title(title or f"Field graph: {Path(input).name}", fontsize=13, pad=20)

    leg = None
    if show_legend:
        legend_elems = [
            Line2D([0], [0], marker="s", color="w", label=k, markerfacecolor=c, markersize=12)
            for k, c in KIND_COLORS.items()
        ] + [
            Line2D([0], [0], color=EDGE_EAGER, lw=2, label="eager"),
            Line2D([0], [0], color=EDGE_LAZY, lw=2, ls="--", label="lazy"),
        ]
        leg = fig.legend(handles=legend_elems, loc="upper left", bbox_to_anchor=(0.05, 0.92),
                         frameon=False, fontsize=9, ncol=4)

    plt.tight_layout()
    extra = dict(bbox_extra_artists=(leg,)) if leg else {}
    save_fig(fig, out, bbox_inches="tight", pad_inches=0.05, **extra)
    log.info(f"[ok] wrote field graph to {out}")


if __name__ == "__main__":
    app()
