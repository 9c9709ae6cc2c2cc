"""Renderer output tests (exact layout for term, structure for the rest)."""

from __future__ import annotations

import json

import pytest
import typer

from core.errors import ConfigurationError
from core.options import TreeOptions
from planner.dependency_graph import DependencyGraph, Status, assemble
from planner.record_parser import parse_records
from planner.tree_resolver import resolve
from renderers.box_renderer import connector_prefix, wrap_rows
from renderers.html_renderer import HTML_ROW
from renderers.renderer_registry import build_default_registry, build_renderer

H = "─"

EXAMPLE = "# A\n- : B C\n# B\n- : C\n# ~C\n"

OWNED = """\
# A
- @ bob
- % write docs
- : B
# ~B
- @ al
"""


def render(text: str, width: int | None = 80, **options: object) -> str:
    opts = TreeOptions(**options)
    graph = assemble(parse_records(text), targets=opts.targets, auto_add=opts.auto_add)
    tree = resolve(graph, opts, width=width)
    return build_renderer(opts).render(tree)


def test_connector_prefix() -> None:
    assert connector_prefix([]) == ""
    assert connector_prefix([False]) == "├── "
    assert connector_prefix([True]) == "└── "
    assert connector_prefix([False, True]) == "│   └── "
    assert connector_prefix([True, False]) == "    ├── "
    assert connector_prefix([True], reverse=True) == "┌── "
    assert connector_prefix([False], space="&nbsp;") == "├──&nbsp;"


def test_wrap_rows() -> None:
    assert wrap_rows([], 5) == [""]
    assert wrap_rows(["abcdefg", "", "xy"], 3) == ["abc", "def", "g", "", "xy"]


def test_term_tree_without_cells() -> None:
    output = render(EXAMPLE, no_color=True)

    assert output == (
        "/" + " " * 15 + "\n"
        "└── A" + " " * 11 + "\n"
        "    └── B" + " " * 7 + "\n"
        "        └── C" + " " * 3 + "\n"
    )


def test_term_tree_with_owner_and_comment_columns() -> None:
    output = render(OWNED, no_color=True)

    expected = [
        " " * 13 + "┌─" + H * 5 + "─┬─" + H * 10 + "─┐",
        "/" + " " * 11 + " │ OWNER │ COMMENT    │",
        "│" + " " * 11 + " ├─" + H * 5 + "─┼─" + H * 10 + "─┤",
        "└── A" + " " * 7 + " │ bob   │ write docs │",
        "    │" + " " * 7 + " ├─" + H * 5 + "─┼─" + H * 10 + "─┤",
        "    └── B   " + " │ al    │ " + " " * 10 + " │",
        " " * 12 + " └─" + H * 5 + "─┴─" + H * 10 + "─┘",
    ]
    assert output == "\n".join(expected) + "\n"


def test_term_wraps_long_comments() -> None:
    output = render("# A\n- % abcdefghij\n", width=21, no_color=True)

    expected = [
        " " * 9 + "┌─" + H * 5 + "─┐",
        "/" + " " * 7 + " │ COMME │",
        "│" + " " * 7 + " │ NT    │",
        "│" + " " * 7 + " ├─" + H * 5 + "─┤",
        "└── A   " + " │ abcde │",
        " " * 8 + " │ fghij │",
        " " * 8 + " └─" + H * 5 + "─┘",
    ]
    assert output == "\n".join(expected) + "\n"


def test_term_truncation_suffix() -> None:
    lines = [line.rstrip() for line in render(EXAMPLE, depth=1, no_color=True).splitlines()]

    assert lines == ["/", "└── A", "    ├── B/", "    └── C"]


def test_term_reverse_mirrors_tree() -> None:
    lines = [line.rstrip() for line in render("# R\n- : X Y\n# X\n# Y\n", reverse=True, no_color=True).splitlines()]

    assert lines == ["    ┌── Y", "    ├── X", "┌── R", "/"]


def test_term_colors_follow_status() -> None:
    output = render(EXAMPLE, hide_completed=False)

    assert typer.style("B", fg=typer.colors.RED) in output
    assert typer.style("C", fg=typer.colors.BLUE, strikethrough=True) in output
    assert "└── A " in output


def test_html_rows_and_escaping() -> None:
    output = render("# R&D\n- @ team one\n- : ~x\n", auto_add=True, format="html")
    rows = output.splitlines()

    assert all(row.startswith(HTML_ROW) and row.endswith("</p>") for row in rows)
    assert "R&amp;D" in output
    assert "team&nbsp;one" in output
    assert "<span style='color:red'>R&amp;D</span>" in output
    assert "<span style='text-decoration:line-through;color:blue'>x</span>" in output
    assert "├──&nbsp;" not in output and "└──&nbsp;<span" in output
    assert len(rows) == len(render("# R&D\n- @ team one\n- : ~x\n", auto_add=True, format="term").splitlines())


def test_json_structure() -> None:
    payload = json.loads(render(OWNED, format="json"))

    assert payload["name"] == "/"
    assert "owner" not in payload
    (a,) = payload["dependencies"]
    assert a == {
        "name": "A",
        "status": "actionable",
        "owner": "bob",
        "comment": "write docs",
        "dependencies": [
            {"name": "B", "status": "completed", "owner": "al", "comment": "", "dependencies": []},
        ],
    }


def test_json_marks_truncated_nodes() -> None:
    payload = json.loads(render(EXAMPLE, format="json", depth=1))

    b = payload["dependencies"][0]["dependencies"][0]
    assert b["name"] == "B/"
    assert b["truncated"] is True
    assert "owner" not in b and "comment" not in b


def test_markdown_output_normalizes_markers() -> None:
    source = (
        "Title line\n"
        "\n"
        "# A\n"
        "- @ bob\n"
        "- : B ~C\n"
        "- % first\n"
        "- % sec\\*ond\n"
        "# B\n"
        "- : ~C\n"
    )

    output = render(source, format="md", auto_add=True)

    assert output == (
        "Title line\n"
        "\n"
        "# A\n"
        "- @ bob\n"
        "- : B C\n"
        "- % first\n"
        "- % sec\\*ond\n"
        "# B\n"
        "- : C\n"
        "# ~C\n"
    )


def test_markdown_round_trip_preserves_model() -> None:
    source = (
        "intro\n"
        "# ship\n"
        "- @ ops team\n"
        "- % needs \\_review\\_\n"
        "- : build docs\n"
        "trailing note\n"
        "# build\n"
        "- : compile\n"
        "# ~~compile~~\n"
        "# docs\n"
        "- @ writer\n"
    )
    original = assemble(parse_records(source))
    resolve(original, TreeOptions())
    text = render(source, format="md")
    again = assemble(parse_records(text))
    resolve(again, TreeOptions())

    def model(graph: DependencyGraph) -> dict[str, tuple[Status, str, list[str], set[str]]]:
        return {
            node.name: (node.status, node.owner, node.comment_lines, set(node.dependency_names))
            for node in graph
        }

    assert model(again) == model(original)
    assert again.prelude == ["intro"]
    assert again.get("ship").auxiliary_lines == ["trailing note"]


def test_markdown_with_hidden_completed_todos_parses_again() -> None:
    text = render(EXAMPLE, format="md", hide_completed=True)

    assert text == "# A\n- : B\n# B\n"
    again = assemble(parse_records(text))
    resolve(again, TreeOptions())
    assert again.get("A").status is Status.PENDING
    assert again.get("B").status is Status.ACTIONABLE


@pytest.mark.parametrize("fmt", ["json", "md"])
def test_reverse_is_rejected_for_structured_formats(fmt: str) -> None:
    with pytest.raises(ConfigurationError, match="reverse"):
        build_renderer(TreeOptions(format=fmt, reverse=True))


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="wrong format string 'svg'"):
        build_renderer(TreeOptions(format="svg"))


def test_registry_lists_formats() -> None:
    assert build_default_registry().formats() == ["html", "json", "md", "term"]
