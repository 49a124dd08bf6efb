"""Pytest configuration and fixtures."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from openingscope.config import Settings, get_test_settings
from openingscope.models import Edge, GraphData, GraphMode, PositionNode
from openingscope.viewport import ManualScheduler, ViewportCallbacks, ViewportConfig, ViewportController


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def make_node() -> Callable[..., PositionNode]:
    """Factory for played, positioned nodes."""

    def factory(node_id: str, x: float = 0.0, y: float = 0.0, **kwargs) -> PositionNode:
        kwargs.setdefault("fen", f"fen-{node_id}")
        kwargs.setdefault("game_count", 10)
        kwargs.setdefault("win_rate", 50.0)
        return PositionNode(id=node_id, x=x, y=y, **kwargs)

    return factory


@pytest.fixture
def sample_graph() -> GraphData:
    """Small unpositioned opening tree: 1.e4 (1...e5, 1...c5) and 1.d4."""
    nodes = [
        PositionNode(id="root", fen="start", is_root=True, game_count=40, win_rate=55.0, san="Start"),
        PositionNode(
            id="e4", fen="fen-e4", move_sequence=["e4"], depth=1, san="e4",
            game_count=25, win_rate=60.0, opening_name="King's Pawn Opening", is_main_line=True,
        ),
        PositionNode(
            id="d4", fen="fen-d4", move_sequence=["d4"], depth=1, san="d4",
            game_count=15, win_rate=45.0, opening_name="Queen's Pawn Opening",
        ),
        PositionNode(
            id="e4e5", fen="fen-e4e5", move_sequence=["e4", "e5"], depth=2, san="e5",
            game_count=12, win_rate=55.0, opening_name="King's Pawn Opening", is_main_line=True,
        ),
        PositionNode(
            id="e4c5", fen="fen-e4c5", move_sequence=["e4", "c5"], depth=2, san="c5",
            game_count=13, win_rate=65.0, opening_name="Sicilian Defense",
        ),
    ]
    edges = [
        Edge(source="root", target="e4"),
        Edge(source="root", target="d4"),
        Edge(source="e4", target="e4e5"),
        Edge(source="e4", target="e4c5"),
    ]
    return GraphData(nodes=nodes, edges=edges)


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def callbacks() -> ViewportCallbacks:
    """Every host callback replaced by a MagicMock."""
    return ViewportCallbacks(
        on_node_click=MagicMock(),
        on_node_hover=MagicMock(),
        on_node_hover_end=MagicMock(),
        on_cluster_hover=MagicMock(),
        on_cluster_hover_end=MagicMock(),
        on_node_right_click=MagicMock(),
        on_auto_fit_complete=MagicMock(),
        on_resize_state_change=MagicMock(),
        on_initializing_state_change=MagicMock(),
        on_transform_change=MagicMock(),
    )


@pytest.fixture
def viewport_config() -> ViewportConfig:
    """Opening-mode config with default timings (independent of the environment)."""
    return ViewportConfig(mode=GraphMode.OPENING)


@pytest.fixture
def controller(
    scheduler: ManualScheduler,
    viewport_config: ViewportConfig,
    callbacks: ViewportCallbacks,
    sample_graph: GraphData,
) -> ViewportController:
    """Controller that has data, a measured 800x600 canvas and is ready."""
    ctrl = ViewportController(scheduler, viewport_config, callbacks)
    ctrl.set_graph_data(sample_graph)
    ctrl.measure(800, 600)
    return ctrl
