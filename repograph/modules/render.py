# repograph/modules/render.py
"""
Graphviz (dot) rendering of a PackageUniverse.

Two layouts:
  - cluster: one `subgraph cluster_<repo>` per repository, nodes colored by
    publish policy (blue: never published, green: default registry).
  - colors: flat graph, every node filled with its repository's color.

Only "interesting" dependencies are drawn: path dependencies (blue arrows)
and dependencies pinned to an explicit registry. Plain crates.io-style
dependencies would drown the picture.

    repograph repos.toml | dot -Tsvg > deps.svg
"""

from __future__ import annotations
from typing import List, TextIO

from repograph.modules.errors import FatalConfigurationError
from repograph.modules.model import PackageUniverse, PublishPolicy

PALETTE = [
    "#e6194b", "#3cb44b", "#ffe119", "#4363d8", "#f58231", "#911eb4", "#46f0f0", "#f032e6",
    "#bcf60c", "#fabebe", "#008080", "#e6beff", "#9a6324", "#fffac8", "#800000", "#aaffc3",
    "#808000", "#ffd8b1", "#000075", "#808080", "#ffffff", "#000000",
]

PUBLISH_STYLES = {
    PublishPolicy.NOWHERE: "color=blue",
    PublishPolicy.DEFAULT: "color=green",
    PublishPolicy.EXPLICIT: "",
}

PATH_EDGE_STYLE = "color=blue"


class GraphMode:
    CLUSTER = "cluster"
    COLORS = "colors"


def quote(ident: str) -> str:
    return '"' + ident.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _node(name: str, attrs: str) -> str:
    if attrs:
        return f"{quote(name)} [{attrs}];"
    return f"{quote(name)};"


def check_palette(universe: PackageUniverse):
    if len(universe) > len(PALETTE):
        raise FatalConfigurationError(
            f"asked for a color-based output while there are more repositories than colors available "
            f"({len(universe)} repositories, {len(PALETTE)} colors)")


def _cluster_lines(universe: PackageUniverse) -> List[str]:
    lines = []
    for repo in universe:
        lines.append(f"    subgraph {quote('cluster_' + repo.id)} {{")
        lines.append(f"        label = {quote(repo.id)};")
        lines.append("        style = filled;")
        for pkg in repo:
            lines.append("        " + _node(pkg.name, PUBLISH_STYLES[pkg.publish_policy.kind]))
        lines.append("    }")
    return lines


def _color_lines(universe: PackageUniverse) -> List[str]:
    lines = []
    for idx, repo in enumerate(universe):
        color = PALETTE[idx]
        for pkg in repo:
            lines.append("    " + _node(pkg.name, f"style=filled, fillcolor={quote(color)}"))
    return lines


def _edge_lines(universe: PackageUniverse) -> List[str]:
    lines = []
    for _, pkg in universe.all_packages():
        for dep in pkg.dependencies:
            if not dep.is_significant:
                continue
            edge = f"    {quote(pkg.name)} -> {quote(dep.target_name)}"
            if dep.is_path_dependency:
                edge += f" [{PATH_EDGE_STYLE}]"
            lines.append(edge + ";")
    return lines


def render_graph(universe: PackageUniverse, mode: str = GraphMode.CLUSTER) -> str:
    """Build the whole dot document; raises before producing anything on bad input."""
    if mode == GraphMode.COLORS:
        check_palette(universe)
        nodes = _color_lines(universe)
    elif mode == GraphMode.CLUSTER:
        nodes = _cluster_lines(universe)
    else:
        raise FatalConfigurationError(f"Unknown graph mode: {mode!r}")

    lines = ["digraph G {", "    node [shape=rectangle]"]
    lines.extend(nodes)
    lines.extend(_edge_lines(universe))
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_graph(universe: PackageUniverse, out: TextIO, mode: str = GraphMode.CLUSTER) -> str:
    text = render_graph(universe, mode)
    out.write(text)
    out.flush()
    return text
