"""
Binary search tree indexing records by player name.

The tree is keyed on the exact player name and holds a single record
per name.  Inserting a second record under a name already present
replaces the payload, so for a player with scores in several games the
index only remembers the most recently inserted one.  Queries that need
every record for a player go through the lookup table instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from leaderboard.models.record import Record


@dataclass
class _Node:
    name: str
    record: Record
    left: Optional[_Node] = None
    right: Optional[_Node] = None


@dataclass
class NameIndex:
    """Unbalanced BST of player name -> Record."""

    _root: Optional[_Node] = field(default=None, repr=False)
    _size: int = 0

    def insert(self, record: Record) -> None:
        """Insert *record* under its player name, replacing any existing payload."""
        name = record.player
        if self._root is None:
            self._root = _Node(name, record)
            self._size = 1
            return
        node = self._root
        while True:
            if name == node.name:
                node.record = record
                return
            if name < node.name:
                if node.left is None:
                    node.left = _Node(name, record)
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = _Node(name, record)
                    break
                node = node.right
        self._size += 1

    def find_by_name(self, name: str) -> Record | None:
        node = self._root
        while node is not None:
            if name == node.name:
                return node.record
            node = node.left if name < node.name else node.right
        return None

    def delete(self, name: str) -> bool:
        """Remove the node for *name*.  Returns False if it was absent."""
        parent: Optional[_Node] = None
        node = self._root
        while node is not None and node.name != name:
            parent = node
            node = node.left if name < node.name else node.right
        if node is None:
            return False

        if node.left is not None and node.right is not None:
            # Two children: promote the in-order successor, then splice
            # the successor out of the right subtree.
            succ_parent = node
            successor = node.right
            while successor.left is not None:
                succ_parent = successor
                successor = successor.left
            node.name = successor.name
            node.record = successor.record
            parent, node = succ_parent, successor

        child = node.left if node.left is not None else node.right
        if parent is None:
            self._root = child
        elif parent.left is node:
            parent.left = child
        else:
            parent.right = child
        self._size -= 1
        return True

    def clear(self) -> None:
        self._root = None
        self._size = 0

    # ── Traversal ───────────────────────────────────────────────────────

    def names(self) -> list[str]:
        """All indexed names in ascending order."""
        return [node.name for node in self._in_order()]

    def names_between(self, low: str, high: str) -> list[str]:
        """Indexed names ``n`` with ``low <= n <= high``, ascending."""
        found: list[str] = []
        for node in self._in_order(low):
            if node.name > high:
                break
            found.append(node.name)
        return found

    def _in_order(self, low: str | None = None) -> Iterator[_Node]:
        # Iterative walk; subtrees entirely below *low* are skipped.
        stack: list[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                if low is not None and node.name < low:
                    node = node.right
                    continue
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def __len__(self) -> int:
        return self._size

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_by_name(name) is not None
