# src/ttmctl/engine/tree.py

"""
Task tree builder.

Turns an indented block of lines into an ordered tree. Each non-blank
line becomes one node:

- a line that parses as a task becomes a TaskNode,
- a line starting with `- ` becomes a CommitNote,
- any other line becomes a Label.

Parent/child relations follow indentation depth (the length of the
leading whitespace). Nodes live in an arena and refer to each other by
index; index 0 is the synthetic `root` label at depth -1.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final, Optional, Union

from .errors import NotationError
from .grammar import GrammarRegistry, resolve_registry
from .model import Task
from .section import leading_whitespace
from .task import parse_task

logger = logging.getLogger(__name__)


ROOT_LABEL: Final[str] = "root"
ROOT_DEPTH: Final[int] = -1
COMMIT_PREFIX: Final[str] = "- "


# ---------------------------------------------------------------------
# Node payloads
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TaskNode:
    task: Task


@dataclass(frozen=True, slots=True)
class Label:
    text: str


@dataclass(frozen=True, slots=True)
class CommitNote:
    text: str


TaskTreeNode = Union[TaskNode, Label, CommitNote]


@dataclass(slots=True)
class TreeEntry:
    """
    Arena slot: a payload plus its links.
    """

    node: TaskTreeNode
    depth: int
    parent: Optional[int] = None
    children: list[int] = field(default_factory=list)
    line_no: int = 0


# ---------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------

class TaskTree:
    """
    Ordered, rooted tree of TaskTreeNode values.

    Child order equals source line order. The tree is read-only once
    build_task_tree() returns it.
    """

    ROOT: Final[int] = 0

    def __init__(self) -> None:
        self._entries: list[TreeEntry] = [TreeEntry(node=Label(ROOT_LABEL), depth=ROOT_DEPTH)]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, idx: int) -> TaskTreeNode:
        return self._entries[idx].node

    @property
    def root(self) -> TaskTreeNode:
        return self._entries[self.ROOT].node

    def entry(self, idx: int) -> TreeEntry:
        return self._entries[idx]

    def depth(self, idx: int) -> int:
        return self._entries[idx].depth

    def parent(self, idx: int) -> Optional[int]:
        return self._entries[idx].parent

    def children(self, idx: int = ROOT) -> list[int]:
        return list(self._entries[idx].children)

    def child_nodes(self, idx: int = ROOT) -> list[TaskTreeNode]:
        return [self._entries[c].node for c in self._entries[idx].children]

    def ancestors(self, idx: int) -> Iterator[int]:
        parent = self._entries[idx].parent
        while parent is not None:
            yield parent
            parent = self._entries[parent].parent

    def walk(self, idx: int = ROOT) -> Iterator[tuple[int, int]]:
        """
        Yield (level, index) pairs in pre-order, root excluded.

        `level` counts tree levels below `idx` starting at 0, independent
        of the raw indentation width.
        """
        stack = [(0, c) for c in reversed(self._entries[idx].children)]
        while stack:
            level, cur = stack.pop()
            yield level, cur
            stack.extend((level + 1, c) for c in reversed(self._entries[cur].children))

    def tasks(self) -> Iterator[Task]:
        for _, idx in self.walk():
            node = self._entries[idx].node
            if isinstance(node, TaskNode):
                yield node.task

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------

    def _attach(self, node: TaskTreeNode, depth: int, parent: int, line_no: int) -> int:
        idx = len(self._entries)
        self._entries.append(TreeEntry(node=node, depth=depth, parent=parent, line_no=line_no))
        self._entries[parent].children.append(idx)
        return idx


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_tree_node(line: str, *, grammars: Optional[GrammarRegistry] = None) -> TaskTreeNode:
    """
    Classify one non-blank line. Never raises for non-blank input.
    """
    text = line.strip()
    try:
        return TaskNode(parse_task(text, grammars=grammars))
    except NotationError as e:
        logger.debug("not a task, keeping as annotation: %s", e)

    if text.startswith(COMMIT_PREFIX):
        return CommitNote(text[len(COMMIT_PREFIX):].strip())
    return Label(text)


def build_task_tree(text: str, *, grammars: Optional[GrammarRegistry] = None) -> TaskTree:
    """
    Build a TaskTree from an indented block of lines.

    For each line, walk up from the previously inserted node until an
    ancestor shallower than the new line is found; the new line becomes
    that ancestor's last child. This places deeper lines under the
    previous line, equally deep lines next to it, and shallower lines next
    to the matching ancestor. Blank lines are skipped.
    """
    g = resolve_registry(grammars)
    tree = TaskTree()
    cursor = TaskTree.ROOT

    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        depth = len(leading_whitespace(line))
        node = parse_tree_node(line, grammars=g)

        parent = cursor
        while tree.depth(parent) >= depth:
            parent = tree.parent(parent)

        cursor = tree._attach(node, depth, parent, line_no)
        logger.debug("line %d depth %d -> child of node %d", line_no, depth, parent)

    return tree
