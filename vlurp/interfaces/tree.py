"""
Directory tree rendering for terminal output.
"""

import io
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text
from rich.tree import Tree


def build_tree(directory: Path, tree: Optional[Tree] = None) -> Tree:
    """Build a rich Tree of ``directory`` with entries sorted by name."""

    tree = tree if tree is not None else Tree(Text(directory.name or str(directory)))
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            build_tree(entry, tree.add(Text(f"{entry.name}/")))
        else:
            tree.add(Text(entry.name))
    return tree


def render_tree(path: Path, width: int = 120) -> Optional[str]:
    """
    Render ``path`` as plain text.

    Returns:
        The rendered tree, or None if the directory cannot be read
    """
    try:
        tree = build_tree(Path(path))
    except OSError:
        return None

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    console.print(tree)
    return buffer.getvalue().rstrip('\n')


__all__ = [
    "build_tree",
    "render_tree",
]
