"""Data models for parsed VCAL documents - vcal_lite.

Nodes live in a single arena (Document.nodes) and refer to each other by
index, so a Begin block never holds its children or parent by reference.
"""

from collections.abc import Iterator
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class VCalParameter(BaseModel):
    """A NAME=VALUE parameter attached to a property, e.g. TZID=America/Los_Angeles."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class VCalProperty(BaseModel):
    """One property line: NAME[;PARAM=VALUE]*:VALUE."""

    model_config = ConfigDict(frozen=True)

    node_id: int = Field(..., description="Index of this node in Document.nodes")
    name: str
    parameters: tuple[VCalParameter, ...] = ()
    value: str = ""
    values: tuple[str, ...] = Field(default=(), description="value split on ','")
    parent_id: Optional[int] = Field(
        default=None, description="Index of the enclosing Begin, None at root"
    )
    line_number: int = Field(default=0, description="1-based logical line number")

    @property
    def is_begin(self) -> bool:
        return False

    def get_parameter(self, name: str) -> Optional[str]:
        """Return the value of the first parameter called name, or None."""
        for param in self.parameters:
            if param.name == name:
                return param.value
        return None


class VCalBegin(VCalProperty):
    """A BEGIN:<block> node owning the properties up to its END line."""

    children: tuple[int, ...] = Field(default=(), description="Child node indices, in order")

    @property
    def is_begin(self) -> bool:
        return True

    @property
    def block_name(self) -> str:
        """Block type, e.g. VEVENT for BEGIN:VEVENT."""
        return self.value


VCalNode = Union[VCalBegin, VCalProperty]


class VCalDocument(BaseModel):
    """Result of parsing one VCAL text blob.

    Fields:
        nodes: every Property/Begin in document order (the arena)
        root: indices of the root-level sequence
        dtstart: raw DTSTART value
        tzid: last TZID parameter seen on DTSTART/DTEND
        duration: "+P<seconds>S" computed from DTEND, or the DURATION value
        rrule: raw RRULE value, not expanded
        all_day: True when DTSTART carried a date with no time of day
        start: resolved DTSTART instant (timezone-aware)
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[VCalNode, ...] = ()
    root: tuple[int, ...] = ()
    dtstart: Optional[str] = None
    tzid: Optional[str] = None
    duration: Optional[str] = None
    rrule: Optional[str] = None
    all_day: bool = False
    start: Optional[datetime] = None

    @property
    def properties(self) -> list[VCalNode]:
        """Root-level nodes, in document order."""
        return [self.nodes[i] for i in self.root]

    def node(self, node_id: int) -> VCalNode:
        return self.nodes[node_id]

    def children_of(self, node: VCalProperty) -> list[VCalNode]:
        if not isinstance(node, VCalBegin):
            return []
        return [self.nodes[i] for i in node.children]

    def parent_of(self, node: VCalProperty) -> Optional[VCalBegin]:
        if node.parent_id is None:
            return None
        parent = self.nodes[node.parent_id]
        if not isinstance(parent, VCalBegin):
            raise TypeError(
                f"Node {node.node_id} names node {node.parent_id} as parent, which is not a BEGIN"
            )
        return parent

    def find(self, name: str) -> list[VCalNode]:
        """Root-level properties called name."""
        return [prop for prop in self.properties if prop.name == name]

    def walk(self) -> Iterator[tuple[int, VCalNode]]:
        """Yield (depth, node) pairs depth-first, root nodes at depth 0.

        Children follow their Begin immediately, one level deeper. Nothing is
        printed here; callers decide how to render the tree.
        """
        stack: list[tuple[int, int]] = [(0, i) for i in reversed(self.root)]
        while stack:
            depth, node_id = stack.pop()
            node = self.nodes[node_id]
            yield depth, node
            if isinstance(node, VCalBegin):
                stack.extend((depth + 1, i) for i in reversed(node.children))
