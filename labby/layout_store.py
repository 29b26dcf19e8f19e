"""
Layout store: owns one Layout per home and funnels every widget mutation
through a single write path that re-arranges, stores and persists it.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from labby.auto_layout import generate_layout, resolve_auto_size
from labby.layout_db import LayoutDatabase
from labby.models import Layout, StoredService, Widget
from labby.packing import arrange_two_columns

logger = logging.getLogger(__name__)


class LayoutStore:
    """
    In-memory layouts backed by a LayoutDatabase.

    Writers are serialized per home. Stored Layout objects are never mutated in
    place; every write swaps in a new one, so readers always see a whole layout.
    """

    def __init__(self, database: Optional[LayoutDatabase] = None):
        self._db = database
        self._layouts: Dict[str, Layout] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._load()

    # ── Reads ────────────────────────────────────────────

    def layout(self, home_name: str) -> Layout:
        """The home's layout, or an empty one (not persisted until first write)."""
        stored = self._layouts.get(home_name)
        if stored is None:
            return Layout(home_name=home_name)
        return stored.model_copy(deep=True)

    def homes(self) -> List[str]:
        return list(self._layouts.keys())

    # ── Writes ───────────────────────────────────────────

    def set_layout(self, layout: Layout):
        """Replace the home's widgets wholesale; a repeated widget id keeps its first occurrence."""
        with self._lock_for(layout.home_name):
            self._commit(layout.home_name, unique_widgets(layout.home_name, layout.widgets))

    def add_widget(self, widget: Widget, home_name: str):
        """Append a widget; no-op when its id is already in the home."""
        def apply(widgets: List[Widget]) -> Optional[List[Widget]]:
            if _index_of(widgets, widget.id) is not None:
                logger.warning(f"[{home_name}] Widget {widget.id} already exists, not added")
                return None
            return widgets + [widget]
        self._mutate(home_name, apply)

    def update_widget(self, widget: Widget, home_name: str):
        """Replace the widget with the same id; no-op when it is not in the home."""
        def apply(widgets: List[Widget]) -> Optional[List[Widget]]:
            for i, w in enumerate(widgets):
                if w.id == widget.id:
                    return widgets[:i] + [widget] + widgets[i + 1:]
            return None
        self._mutate(home_name, apply)

    def remove_widget(self, widget_id: str, home_name: str):
        def apply(widgets: List[Widget]) -> Optional[List[Widget]]:
            remaining = [w for w in widgets if w.id != widget_id]
            return remaining if len(remaining) < len(widgets) else None
        self._mutate(home_name, apply)

    def move_widget(self, widget_id: str, to_index: int, home_name: str):
        """Move a widget to ``to_index`` (clamped to the sequence bounds)."""
        self._mutate(home_name, lambda widgets: _moved(widgets, widget_id, to_index))

    def move_widget_onto(self, widget_id: str, target_id: str, home_name: str):
        """Drop ``widget_id`` onto ``target_id`` (drag-reorder gesture)."""
        def apply(widgets: List[Widget]) -> Optional[List[Widget]]:
            source = _index_of(widgets, widget_id)
            target = _index_of(widgets, target_id)
            if source is None or target is None:
                return None
            return _moved(widgets, widget_id, drop_index(source, target))
        self._mutate(home_name, apply)

    def remove_all(self, home_name: str):
        """Forget the home's layout; the next ensure_layout regenerates it."""
        with self._lock_for(home_name):
            self._layouts.pop(home_name, None)
            if self._db is not None:
                try:
                    self._db.delete(home_name)
                except Exception as e:
                    logger.error(f"[{home_name}] Failed to delete persisted layout: {e}")

    def remove_all_homes(self):
        for home_name in self.homes():
            with self._lock_for(home_name):
                self._layouts.pop(home_name, None)
        if self._db is not None:
            try:
                self._db.clear()
            except Exception as e:
                logger.error(f"Failed to clear persisted layouts: {e}")

    def ensure_layout(self, home_name: str, services: Sequence[StoredService]) -> Layout:
        """
        Auto-generate the layout on first access to a home that has services.
        A home emptied widget by widget stays empty.
        """
        with self._lock_for(home_name):
            if home_name not in self._layouts and services:
                generated = generate_layout(home_name, services)
                self._commit(home_name, generated.widgets)
        return self.layout(home_name)

    def prune_service(self, service_id: str) -> int:
        """Remove every widget bound to ``service_id``; returns how many were removed."""
        removed = 0
        for home_name in self.homes():
            with self._lock_for(home_name):
                stored = self._layouts.get(home_name)
                if stored is None:
                    continue
                widgets = stored.widgets
                remaining = [w for w in widgets if w.service_id != service_id]
                if len(remaining) < len(widgets):
                    removed += len(widgets) - len(remaining)
                    self._commit(home_name, remaining)
        if removed:
            logger.info(f"[{service_id}] Pruned {removed} orphaned widgets")
        return removed

    # ── Internals ────────────────────────────────────────

    def _lock_for(self, home_name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(home_name)
            if lock is None:
                lock = self._locks[home_name] = threading.Lock()
            return lock

    def _mutate(self, home_name: str, apply: Callable[[List[Widget]], Optional[List[Widget]]]):
        with self._lock_for(home_name):
            stored = self._layouts.get(home_name)
            widgets = list(stored.widgets) if stored else []
            updated = apply(widgets)
            if updated is None:
                return
            self._commit(home_name, updated)

    def _commit(self, home_name: str, widgets: List[Widget]):
        """Caller holds the home's lock."""
        arranged = arrange_two_columns([resolve_auto_size(w) for w in widgets])
        layout = Layout(home_name=home_name, widgets=arranged)
        self._layouts[home_name] = layout
        self._persist(layout)

    def _persist(self, layout: Layout):
        if self._db is None:
            return
        try:
            self._db.save(layout.home_name, layout.model_dump(mode="json"))
        except Exception as e:
            # in-memory state stays authoritative
            logger.error(f"[{layout.home_name}] Failed to persist layout: {e}")

    def _load(self):
        if self._db is None:
            return
        try:
            blobs = self._db.load_all()
        except Exception as e:
            logger.error(f"Failed to load layouts: {e}")
            return
        for home_name, blob in blobs.items():
            self._layouts[home_name] = decode_layout(home_name, blob)
        logger.info(f"Loaded {len(self._layouts)} home layouts")


def _index_of(widgets: Sequence[Widget], widget_id: str) -> Optional[int]:
    for i, w in enumerate(widgets):
        if w.id == widget_id:
            return i
    return None


def _moved(widgets: List[Widget], widget_id: str, to_index: int) -> Optional[List[Widget]]:
    current = _index_of(widgets, widget_id)
    if current is None:
        return None
    target = max(0, min(to_index, len(widgets) - 1))
    if target == current:
        return None
    moved = list(widgets)
    item = moved.pop(current)
    moved.insert(target, item)
    return moved


def unique_widgets(home_name: str, widgets: Sequence[Widget]) -> List[Widget]:
    """Drop widgets whose id already appeared earlier in the sequence."""
    seen = set()
    kept: List[Widget] = []
    for w in widgets:
        if w.id in seen:
            logger.warning(f"[{home_name}] Dropping duplicate widget {w.id}")
            continue
        seen.add(w.id)
        kept.append(w)
    return kept


def drop_index(source_index: int, target_index: int) -> int:
    """Insertion index for dropping the item at ``source_index`` onto ``target_index``."""
    if source_index < target_index:
        return target_index - 1
    return target_index


def decode_layout(home_name: str, blob: dict) -> Layout:
    """Rebuild a persisted layout, dropping widgets that no longer validate."""
    widgets: List[Widget] = []
    raw_widgets = blob.get("widgets") if isinstance(blob, dict) else None
    if not isinstance(raw_widgets, list):
        logger.warning(f"[{home_name}] Persisted layout has no widget list, starting empty")
        raw_widgets = []
    for raw in raw_widgets:
        try:
            widgets.append(Widget.model_validate(raw))
        except ValidationError as e:
            wid = raw.get("id") if isinstance(raw, dict) else None
            logger.warning(f"[{home_name}] Dropping unreadable widget {wid}: {e.error_count()} errors")
    return Layout(home_name=home_name, widgets=unique_widgets(home_name, widgets))
