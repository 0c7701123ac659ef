"""Shared fixtures for the tactical engine tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tactical_engine.types import FieldPosition, Formation, Player, Slot

if TYPE_CHECKING:
    from pytest import MonkeyPatch

# role, x, y for a symmetric 4-4-2
FOUR_FOUR_TWO = [
    ("GK", 50, 5),
    ("LB", 10, 22),
    ("CB", 35, 20),
    ("CB", 65, 20),
    ("RB", 90, 22),
    ("LM", 10, 50),
    ("CM", 35, 50),
    ("CM", 65, 50),
    ("RM", 90, 50),
    ("ST", 40, 85),
    ("ST", 60, 85),
]


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch: MonkeyPatch) -> None:
    """Keep the engine on the disabled gateway unless a test opts in."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture
def balanced_team() -> tuple[Formation, list[Player]]:
    """A well-shaped 4-4-2 with every player in their natural role."""
    slots: list[Slot] = []
    players: list[Player] = []
    for index, (role, x, y) in enumerate(FOUR_FOUR_TWO, start=1):
        player_id = f"p{index}"
        slots.append(
            Slot(
                id=f"s{index}",
                role=role,
                position=FieldPosition(x=x, y=y),
                player_id=player_id,
            )
        )
        players.append(
            Player(
                id=player_id,
                name=f"Player {index}",
                preferred_role=role,
                current_potential=80,
            )
        )
    return Formation(id="442", name="4-4-2", slots=slots), players


@pytest.fixture
def right_heavy_formation() -> Formation:
    """Ten empty slots crowded on the right (average x of 70)."""
    xs = [65, 68, 70, 72, 75, 65, 68, 70, 72, 75]
    ys = [10, 20, 30, 40, 50, 60, 70, 80, 85, 90]
    return Formation(
        id="right-heavy",
        name="Right Heavy",
        slots=[
            Slot(id=f"s{i}", position=FieldPosition(x=x, y=y))
            for i, (x, y) in enumerate(zip(xs, ys, strict=True))
        ],
    )
