"""
Rebuild the folder hierarchy of a package from its flat entry list.

ZIP archives store full paths and frequently omit directory records, so
every directory implied by a file path is synthesised here.  Example::

    lib/net6.0/Foo.dll   ->   lib/
                                 net6.0/
                                    Foo.dll
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple

from .models import FileEntry

__all__ = [
    "build_file_tree",
    "iter_file_tree",
]


@dataclass
class _Node:
    """Mutable stand-in for :class:`FileEntry` while the tree grows."""

    entry: FileEntry
    children: List["_Node"] = field(default_factory=list)

    def freeze(self) -> FileEntry:
        e = self.entry
        if not e.is_directory:
            return e
        return FileEntry(
            path=e.path,
            name=e.name,
            size=e.size,
            is_directory=True,
            children=tuple(c.freeze() for c in self.children),
        )


def build_file_tree(entries: Iterable[FileEntry]) -> Tuple[FileEntry, ...]:
    """Return top-level nodes with directories recursively populated.

    Entries are processed in path order.  Each directory, explicit or
    implied, becomes exactly one node; the first occurrence of a path wins.
    """
    top: List[_Node] = []
    by_path: Dict[str, _Node] = {}

    for entry in sorted(entries, key=lambda e: e.path):
        if entry.path in by_path:
            continue
        parts = [p for p in entry.path.split("/") if p]
        if not parts:
            continue

        siblings = top
        prefix = ""
        for segment in parts[:-1]:
            prefix += segment + "/"
            parent = by_path.get(prefix)
            if parent is None:
                parent = _Node(FileEntry(path=prefix, name=segment, size=0, is_directory=True, children=()))
                siblings.append(parent)
                by_path[prefix] = parent
            siblings = parent.children

        node = _Node(entry)
        siblings.append(node)
        by_path[entry.path] = node

    return tuple(n.freeze() for n in top)


def iter_file_tree(nodes: Iterable[FileEntry]) -> Iterator[FileEntry]:
    """Depth-first walk over *nodes* and all their descendants."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_file_tree(node.children)
