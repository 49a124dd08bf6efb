"""Position graph models - opening positions and the moves between them."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

DEFAULT_NODE_SIZE = 180.0


class GraphMode(str, Enum):
    """What the graph is showing."""

    OPENING = "opening"  # Repertoire tree, coloured by side to move
    PERFORMANCE = "performance"  # Game statistics, coloured by win rate


@dataclass
class PositionNode:
    """
    A chess position reached in the player's games.

    Coordinates are world units and refer to the node centre. They stay
    None until a layout pass assigns them; layout returns new node
    objects rather than moving existing ones.
    """

    id: str
    fen: str
    move_sequence: list[str] = field(default_factory=list)  # SAN moves from the start position

    # World placement (centre based)
    x: float | None = None
    y: float | None = None
    width: float = DEFAULT_NODE_SIZE
    height: float = DEFAULT_NODE_SIZE

    # Statistics
    win_rate: float | None = None  # Percent, 0-100
    game_count: int = 0
    depth: int = 0  # Plies from the start position
    is_root: bool = False
    is_missing: bool = False  # Repertoire move never played

    # Display
    san: str = ""
    label: str = ""
    opening_name: str | None = None
    is_main_line: bool = False
    is_initial_move: bool = False
    has_comment: bool = False
    has_links: bool = False
    link_count: int = 0
    arrows: list[str] = field(default_factory=list)  # Arrow colours drawn on the board

    # Derived display flag, toggled by the viewport controller
    is_selected: bool = False

    @property
    def is_positioned(self) -> bool:
        """True once the node has finite world coordinates."""
        return (
            self.x is not None
            and self.y is not None
            and math.isfinite(self.x)
            and math.isfinite(self.y)
        )

    def positioned_at(self, x: float, y: float) -> "PositionNode":
        """Return a copy of this node placed at (x, y)."""
        return replace(self, x=x, y=y)

    def to_dict(self) -> dict:
        """Convert to a plain dictionary."""
        return {
            "id": self.id,
            "fen": self.fen,
            "move_sequence": list(self.move_sequence),
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "win_rate": self.win_rate,
            "game_count": self.game_count,
            "depth": self.depth,
            "is_root": self.is_root,
            "is_missing": self.is_missing,
            "san": self.san,
            "label": self.label,
            "opening_name": self.opening_name,
            "is_main_line": self.is_main_line,
            "is_initial_move": self.is_initial_move,
            "has_comment": self.has_comment,
            "has_links": self.has_links,
            "link_count": self.link_count,
            "arrows": list(self.arrows),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositionNode":
        """Create from a dictionary, tolerating absent optional keys."""
        move_sequence = list(data.get("move_sequence") or [])
        return cls(
            id=str(data["id"]),
            fen=data.get("fen", ""),
            move_sequence=move_sequence,
            x=data.get("x"),
            y=data.get("y"),
            width=data.get("width", DEFAULT_NODE_SIZE),
            height=data.get("height", DEFAULT_NODE_SIZE),
            win_rate=data.get("win_rate"),
            game_count=int(data.get("game_count") or 0),
            depth=int(data.get("depth", len(move_sequence))),
            is_root=bool(data.get("is_root", False)),
            is_missing=bool(data.get("is_missing", False)),
            san=data.get("san", ""),
            label=data.get("label", ""),
            opening_name=data.get("opening_name"),
            is_main_line=bool(data.get("is_main_line", False)),
            is_initial_move=bool(data.get("is_initial_move", False)),
            has_comment=bool(data.get("has_comment", False)),
            has_links=bool(data.get("has_links", False)),
            link_count=int(data.get("link_count", 0)),
            arrows=list(data.get("arrows") or []),
        )


@dataclass
class Edge:
    """A move from one position to the next.

    Statistics are copied from the target node and refreshed whenever
    the node set is rebuilt.
    """

    source: str
    target: str
    win_rate: float | None = None
    game_count: int = 0
    is_missing: bool = False
    is_main_line: bool = False

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"

    @classmethod
    def to_node(cls, source: str, target: PositionNode) -> "Edge":
        """Build the edge leading into ``target``."""
        return cls(
            source=source,
            target=target.id,
            win_rate=target.win_rate,
            game_count=target.game_count,
            is_missing=target.is_missing,
            is_main_line=target.is_main_line,
        )

    def to_dict(self) -> dict:
        """Convert to a plain dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "win_rate": self.win_rate,
            "game_count": self.game_count,
            "is_missing": self.is_missing,
            "is_main_line": self.is_main_line,
        }


@dataclass
class GraphData:
    """Nodes and edges handed to the viewport by the move-tree owner."""

    nodes: list[PositionNode] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_by_id(self) -> dict[str, PositionNode]:
        """Index nodes by id."""
        return {node.id: node for node in self.nodes}

    def rebuild_edges(self) -> "GraphData":
        """Recopy derived edge statistics from the current nodes.

        Edges whose endpoints are no longer present are dropped.
        """
        by_id = self.node_by_id()
        edges = [
            Edge.to_node(edge.source, by_id[edge.target])
            for edge in self.edges
            if edge.source in by_id and edge.target in by_id
        ]
        return GraphData(nodes=list(self.nodes), edges=edges)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphData":
        """Create from ``{"nodes": [...], "edges": [...]}``."""
        nodes = [PositionNode.from_dict(n) for n in data.get("nodes", [])]
        edges = [
            Edge(
                source=str(e["source"]),
                target=str(e["target"]),
                win_rate=e.get("win_rate"),
                game_count=int(e.get("game_count") or 0),
                is_missing=bool(e.get("is_missing", False)),
                is_main_line=bool(e.get("is_main_line", False)),
            )
            for e in data.get("edges", [])
        ]
        return cls(nodes=nodes, edges=edges)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
