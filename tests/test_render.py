import io

import pytest

from repograph.modules.errors import FatalConfigurationError
from repograph.modules.model import PublishPolicy
from repograph.modules.render import PALETTE, GraphMode, quote, render_graph, write_graph


def test_cluster_mode_document(build):
    u = build.universe(
        ("repoA", [
            build.pkg("x", build.dep("y", path=True), publish=PublishPolicy.nowhere()),
            build.pkg("w", publish=PublishPolicy.at(["custom"])),
        ]),
        ("repoB", [build.pkg("y", build.dep("x", registry="custom"))]),
    )
    assert render_graph(u) == "\n".join([
        'digraph G {',
        '    node [shape=rectangle]',
        '    subgraph "cluster_repoA" {',
        '        label = "repoA";',
        '        style = filled;',
        '        "x" [color=blue];',
        '        "w";',
        '    }',
        '    subgraph "cluster_repoB" {',
        '        label = "repoB";',
        '        style = filled;',
        '        "y" [color=green];',
        '    }',
        '    "x" -> "y" [color=blue];',
        '    "y" -> "x";',
        '}',
    ]) + "\n"


def test_colored_mode_uses_repository_index(build):
    u = build.universe(
        ("repoA", [build.pkg("a")]),
        ("repoB", [build.pkg("b1"), build.pkg("b2")]),
    )
    out = render_graph(u, GraphMode.COLORS)
    assert "subgraph" not in out
    assert f'    "a" [style=filled, fillcolor="{PALETTE[0]}"];' in out
    assert f'    "b1" [style=filled, fillcolor="{PALETTE[1]}"];' in out
    assert f'    "b2" [style=filled, fillcolor="{PALETTE[1]}"];' in out


def test_palette_has_22_colors():
    assert len(PALETTE) == 22


def test_colored_mode_at_palette_size(build):
    u = build.universe(*[(f"r{i}", [build.pkg(f"p{i}")]) for i in range(len(PALETTE))])
    out = render_graph(u, GraphMode.COLORS)
    assert PALETTE[-1] in out


def test_colored_mode_beyond_palette_writes_nothing(build):
    u = build.universe(*[(f"r{i}", [build.pkg(f"p{i}")]) for i in range(len(PALETTE) + 1)])
    buf = io.StringIO()
    with pytest.raises(FatalConfigurationError):
        write_graph(u, buf, GraphMode.COLORS)
    assert buf.getvalue() == ""
    # clustered mode has no such limit
    assert render_graph(u, GraphMode.CLUSTER).startswith("digraph G {")


def test_plain_dependencies_are_not_drawn(build):
    u = build.universe(("repoA", [build.pkg("x", "lib")]))
    assert "->" not in render_graph(u)


def test_edges_to_unresolved_targets_are_drawn(build):
    u = build.universe(("repoA", [build.pkg("x", build.dep("vendored", path=True),
                                            build.dep("internal-log", registry="corp"))]))
    out = render_graph(u)
    assert '    "x" -> "vendored" [color=blue];' in out
    assert '    "x" -> "internal-log";' in out


def test_duplicate_edges_are_all_drawn(build):
    u = build.universe(
        ("repoA", [build.pkg("x", build.dep("y", path=True), build.dep("y", path=True), "y")]),
        ("repoB", [build.pkg("y")]),
    )
    assert render_graph(u).count('"x" -> "y" [color=blue];') == 2


def test_rendering_is_idempotent(build):
    u = build.universe(
        ("repoA", [build.pkg("x", build.dep("y", path=True))]),
        ("repoB", [build.pkg("y", build.dep("x", registry="custom"))]),
    )
    assert render_graph(u) == render_graph(u)
    assert render_graph(u, GraphMode.COLORS) == render_graph(u, GraphMode.COLORS)


def test_identifiers_are_escaped():
    assert quote('we"ird') == '"we\\"ird"'
    assert quote("back\\slash") == '"back\\\\slash"'


def test_unknown_mode(build):
    with pytest.raises(FatalConfigurationError):
        render_graph(build.universe(), "sparkles")
