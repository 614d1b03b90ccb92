"""Console preview of decompositions.

Renders a DecomposedObject as a rich tree: one branch per member with its
value, type, categorization flags and evaluation cost.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.text import Text
from rich.tree import Tree

from lookup_engine.models import DecomposedMember, DecomposedObject, MemberAttributes

_FLAG_ORDER = (
    MemberAttributes.PROPERTY,
    MemberAttributes.FIELD,
    MemberAttributes.METHOD,
    MemberAttributes.EVENT,
    MemberAttributes.EXTENSION,
    MemberAttributes.STATIC,
    MemberAttributes.PRIVATE,
)

_MAX_VALUE_WIDTH = 80


def format_attributes(attributes: MemberAttributes) -> str:
    """Lowercase flag names joined by ``|``; empty for the empty flag."""
    return "|".join(flag.name.lower() for flag in _FLAG_ORDER if flag in attributes)


def _shorten(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= _MAX_VALUE_WIDTH:
        return text
    return text[: _MAX_VALUE_WIDTH - 3] + "..."


def _object_label(decomposed: DecomposedObject) -> Text:
    label = Text(_shorten(decomposed.name), style="bold")
    label.append(f"  {decomposed.type_full_name}", style="dim")
    return label


def _member_label(member: DecomposedMember, show_cost: bool) -> Text:
    label = Text(member.name, style="cyan")
    label.append(" = ")
    label.append(_shorten(member.value.name))
    label.append(f"  {member.value.type_name}", style="dim")

    attributes = format_attributes(member.member_attributes)
    if attributes:
        label.append(f"  [{attributes}]", style="magenta")
    if member.value.description:
        label.append(f"  ({member.value.description})", style="italic")
    if show_cost:
        label.append(f"  {member.computation_time:.3f}ms", style="green")
        if member.allocated_bytes:
            label.append(f" {member.allocated_bytes}B", style="green")
    return label


def build_tree(decomposed: DecomposedObject, show_cost: bool = True) -> Tree:
    """Build a rich Tree for a decomposed object.

    Args:
        decomposed: Result of ``decompose``
        show_cost: Append evaluation time and allocation to each member
    """
    tree = Tree(_object_label(decomposed), guide_style="dim")
    for member in decomposed.members:
        tree.add(_member_label(member, show_cost))
    return tree


def print_decomposition(
    decomposed: DecomposedObject,
    console: Console | None = None,
    show_cost: bool = True,
) -> None:
    """Print a decomposition to the console (stdout by default)."""
    console = console or Console()
    if not decomposed.members:
        console.print(f"[bold]{escape(decomposed.name)}[/bold] [dim](no members)[/dim]")
        return
    console.print(build_tree(decomposed, show_cost=show_cost))
