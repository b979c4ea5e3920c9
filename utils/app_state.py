"""
Third Place Index Map — Application State
Immutable dashboard state with pure update functions, and a small store
that applies updates and notifies subscribers.

The tract and place datasets arrive independently; either may be None.
"""
from dataclasses import dataclass, field, replace
from typing import Callable

import pandas as pd

from utils.index_layers import IndexLayer
from utils.stats import build_distributions, build_rankings, get_tract_rank


@dataclass(frozen=True, eq=False)
class AppState:
    tracts: pd.DataFrame | None = None
    places: pd.DataFrame | None = None
    rankings: pd.DataFrame | None = None
    distributions: dict = field(default_factory=dict)
    active_layer: IndexLayer = IndexLayer.OVERALL
    selected_tract_id: str | None = None
    highlighted_category: str | None = None

    @property
    def selected_tract(self) -> dict | None:
        """Row of the selected tract, or None."""
        if self.tracts is None or self.selected_tract_id is None:
            return None
        rows = self.tracts[self.tracts["GEOID"] == self.selected_tract_id]
        if len(rows) == 0:
            return None
        return rows.iloc[0].to_dict()

    @property
    def selected_rank(self) -> int | None:
        if self.rankings is None or self.selected_tract_id is None:
            return None
        return get_tract_rank(self.rankings, self.selected_tract_id)

    @property
    def active_distribution(self) -> list[float]:
        return self.distributions.get(self.active_layer.key, [])


def with_tracts(state: AppState, tracts: pd.DataFrame) -> AppState:
    """Attach the tract dataset and rebuild the rankings and distributions."""
    selected = state.selected_tract_id
    if selected is not None and selected not in set(tracts["GEOID"].astype(str)):
        selected = None
    return replace(
        state,
        tracts=tracts,
        rankings=build_rankings(tracts),
        distributions=build_distributions(tracts),
        selected_tract_id=selected,
    )


def with_places(state: AppState, places: pd.DataFrame) -> AppState:
    return replace(state, places=places)


def set_active_layer(state: AppState, layer_id: str) -> AppState:
    return replace(state, active_layer=IndexLayer.from_id(layer_id))


def select_tract(state: AppState, tract_id: str) -> AppState:
    """Select a tract; ignored until tracts are loaded or when the id is unknown."""
    if state.tracts is None:
        return state
    tract_id = str(tract_id)
    if tract_id not in set(state.tracts["GEOID"].astype(str)):
        return state
    return replace(state, selected_tract_id=tract_id)


def clear_selection(state: AppState) -> AppState:
    return replace(state, selected_tract_id=None)


def highlight_category(state: AppState, category: str | None) -> AppState:
    """Highlight one place category; toggles off when it is already highlighted."""
    if category == state.highlighted_category:
        category = None
    return replace(state, highlighted_category=category)


class StateStore:
    """Holds the current AppState and notifies subscribers on change."""

    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._subscribers: list[Callable[[AppState], None]] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, callback: Callable[[AppState], None]) -> Callable[[], None]:
        """Register callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def dispatch(self, update: Callable[..., AppState], *args) -> AppState:
        """Apply update(state, *args) and notify subscribers if the state changed."""
        new_state = update(self._state, *args)
        if new_state is not self._state:
            self._state = new_state
            for callback in list(self._subscribers):
                callback(new_state)
        return self._state
