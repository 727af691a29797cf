"""
Asset status state machine.

The legal moves between statuses are held by an immutable ``TransitionPolicy``.
Services receive the policy as configuration, so tests can inject alternate
policies without touching module state.

Default graph:

    AVAILABLE   -> ASSIGNED, MAINTENANCE, RETIRED, LOST
    ASSIGNED    -> AVAILABLE, MAINTENANCE, RETIRED, LOST
    MAINTENANCE -> AVAILABLE, RETIRED, LOST
    RETIRED     -> AVAILABLE
    LOST        -> AVAILABLE

Recovered or found assets must re-enter the available pool before they can be
assigned or sent to maintenance again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import assert_never

from src.domain.errors import InvalidTransitionError, StatusUnchangedError
from src.infrastructure.db.models import AssetStatus


def retains_assignee(status: AssetStatus) -> bool:
    """Return whether an asset entering ``status`` may keep its assignee.

    Only ASSIGNED keeps one; every other status clears it in the same write.
    """
    match status:
        case AssetStatus.ASSIGNED:
            return True
        case (
            AssetStatus.AVAILABLE
            | AssetStatus.MAINTENANCE
            | AssetStatus.RETIRED
            | AssetStatus.LOST
        ):
            return False
        case _:
            assert_never(status)


def status_for_assignee(assignee_id: str | None) -> AssetStatus:
    """Status derived from an assignment intent."""
    return AssetStatus.ASSIGNED if assignee_id is not None else AssetStatus.AVAILABLE


@dataclass(frozen=True, slots=True)
class TransitionPolicy:
    """Read-only mapping of status -> statuses it may move to."""

    edges: Mapping[AssetStatus, frozenset[AssetStatus]] = field(repr=False)

    def __post_init__(self) -> None:
        missing = [status.value for status in AssetStatus if status not in self.edges]
        if missing:
            raise ValueError(f"Transition policy missing status(es): {', '.join(missing)}")

        frozen: dict[AssetStatus, frozenset[AssetStatus]] = {}
        for source, targets in self.edges.items():
            source = AssetStatus(source)
            targets = frozenset(AssetStatus(target) for target in targets)
            if source in targets:
                raise ValueError(f"Self-transition not allowed for {source.value}")
            frozen[source] = targets
        object.__setattr__(self, "edges", MappingProxyType(frozen))

    @classmethod
    def from_pairs(
        cls, pairs: Mapping[AssetStatus, Iterable[AssetStatus]]
    ) -> TransitionPolicy:
        return cls({source: frozenset(targets) for source, targets in pairs.items()})

    def allowed_targets(self, current: AssetStatus) -> frozenset[AssetStatus]:
        return self.edges[current]

    def is_allowed(self, current: AssetStatus, requested: AssetStatus) -> bool:
        return requested in self.edges[current]

    def ensure_allowed(self, current: AssetStatus, requested: AssetStatus) -> None:
        """Raise unless ``current -> requested`` is a legal move."""
        if current == requested:
            raise StatusUnchangedError(current)
        if not self.is_allowed(current, requested):
            raise InvalidTransitionError(current, requested)


DEFAULT_TRANSITION_POLICY = TransitionPolicy.from_pairs(
    {
        AssetStatus.AVAILABLE: (
            AssetStatus.ASSIGNED,
            AssetStatus.MAINTENANCE,
            AssetStatus.RETIRED,
            AssetStatus.LOST,
        ),
        AssetStatus.ASSIGNED: (
            AssetStatus.AVAILABLE,
            AssetStatus.MAINTENANCE,
            AssetStatus.RETIRED,
            AssetStatus.LOST,
        ),
        AssetStatus.MAINTENANCE: (
            AssetStatus.AVAILABLE,
            AssetStatus.RETIRED,
            AssetStatus.LOST,
        ),
        AssetStatus.RETIRED: (AssetStatus.AVAILABLE,),
        AssetStatus.LOST: (AssetStatus.AVAILABLE,),
    }
)
