"""Dependency resolver for cascading selectors.

When a parent field changes, every child of its edges is reset (cleared,
hidden, error removed) synchronously inside the ``field.changed`` handler.
Option derivation then runs as an asyncio task:

1. Load the raw options for the parent value.
2. Apply the edge's allow-list filter.
3. No options left: keep the child hidden.
4. One option and ``collapse_if_single``: select it and keep the child
   hidden. Selecting it publishes ``field.changed`` for the child, which
   cascades into the child's own edges.
5. Otherwise publish the options, priority matches first, and show the
   child.

Each edge carries a generation counter. A derivation whose generation or
parent value is no longer current when its load returns is discarded.
"""

import asyncio
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

import structlog

from eventform.cascade.matching import mark_priority, sort_by_priority
from eventform.cascade.models import DependencyEdge, OptionFilter, OptionSource, Values
from eventform.data.models import Option
from eventform.errors import EventFormError
from eventform.events.bus import EventBus, Subscription
from eventform.events.models import EventKind, FieldChanged, FieldOptionsChanged, FormEvent
from eventform.observability.logging import get_logger
from eventform.state.store import FieldStateStore


class DependencyResolver:
    """Keeps dependent selectors consistent with their parent fields.

    The resolver writes field state only through the store's mutation
    methods and keeps the option lists it derives.
    """

    def __init__(
        self,
        store: FieldStateStore,
        bus: EventBus,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._store = store
        self._bus = bus
        self._logger = logger or get_logger(__name__)

        self._edges: dict[str, list[DependencyEdge]] = defaultdict(list)
        self._sources: list[OptionSource] = []
        self._options: dict[str, list[Option]] = {}
        self._generations: dict[int, int] = defaultdict(int)
        self._tasks: set[asyncio.Task[Any]] = set()
        self._subscriptions: list[Subscription] = [
            bus.subscribe(EventKind.STATE_RESET, self._on_reset),
        ]

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_edge(self, edge: DependencyEdge) -> None:
        for key in (edge.parent, *edge.children):
            if not self._store.has_field(key):
                raise ValueError(f"Edge references unknown field: {key}")

        if edge.parent not in self._edges:
            self._subscriptions.append(
                self._bus.subscribe(
                    EventKind.FIELD_CHANGED,
                    self._on_parent_changed,
                    field=edge.parent,
                )
            )
        self._edges[edge.parent].append(edge)

    def add_edges(self, edges: Iterable[DependencyEdge]) -> None:
        for edge in edges:
            self.add_edge(edge)

    def add_source(self, source: OptionSource) -> None:
        if not self._store.has_field(source.field):
            raise ValueError(f"Option source references unknown field: {source.field}")
        self._sources.append(source)

    def edges(self, parent: str | None = None) -> list[DependencyEdge]:
        if parent is not None:
            return list(self._edges.get(parent, []))
        return [edge for edges in self._edges.values() for edge in edges]

    def options(self, key: str) -> list[Option]:
        """Options currently offered for a field."""
        return list(self._options.get(key, []))

    def close(self) -> None:
        """Unsubscribe from the bus and cancel pending derivations."""
        for subscription in self._subscriptions:
            self._bus.unsubscribe(subscription)
        self._subscriptions.clear()
        for task in self._tasks:
            task.cancel()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Derive every option source and every edge whose parent has a value."""
        await asyncio.gather(*(self._derive_source(source) for source in self._sources))
        for parent in list(self._edges):
            value = self._store.get_value(parent) or ""
            if value.strip():
                self.resolve(parent, value)
        await self.wait_idle()

    def resolve(self, parent: str, value: str) -> None:
        """Reset the children of ``parent`` and schedule their derivation."""
        for edge in self._edges.get(parent, []):
            generation = self._bump(edge)
            self._reset_children(edge)

            if not edge.is_active(value):
                continue

            self._spawn(self._derive(edge, value, generation))

    def refresh(self, parent: str) -> None:
        """Re-derive the children of ``parent`` from its current value."""
        self.resolve(parent, self._store.get_value(parent) or "")

    async def wait_idle(self) -> None:
        """Wait until no derivation is pending, including chained ones."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    @property
    def is_idle(self) -> bool:
        return all(task.done() for task in self._tasks)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_parent_changed(self, event: FormEvent) -> None:
        if isinstance(event, FieldChanged):
            self.resolve(event.key, event.current)

    def _on_reset(self, event: FormEvent) -> None:
        for edge in self.edges():
            self._bump(edge)
        for key in list(self._options):
            self._set_options(key, [])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _bump(self, edge: DependencyEdge) -> int:
        self._generations[id(edge)] += 1
        return self._generations[id(edge)]

    def _is_current(self, edge: DependencyEdge, generation: int, value: str) -> bool:
        return (
            self._generations[id(edge)] == generation
            and self._store.get_value(edge.parent) == value
        )

    def _reset_children(self, edge: DependencyEdge) -> None:
        for child in edge.children:
            self._set_options(child, [])
            self._store.set_field_visibility(child, False)
            self._store.update_field(child, "")
            self._store.clear_validation_error(child)
            self._store.set_field_disabled(child, False)

    def _spawn(self, coro: Any) -> asyncio.Task[Any]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _derive(self, edge: DependencyEdge, value: str, generation: int) -> None:
        values = self._store.values()
        try:
            options = await edge.loader(value, values)
        except EventFormError as e:
            self._logger.warning(
                "cascade_load_failed",
                parent=edge.parent,
                field=edge.target,
                error=e.message,
            )
            return
        except Exception as e:
            self._logger.error(
                "cascade_loader_error",
                parent=edge.parent,
                field=edge.target,
                error=str(e),
                exc_info=True,
            )
            return

        if not self._is_current(edge, generation, value):
            self._logger.debug(
                "stale_cascade_result_discarded",
                parent=edge.parent,
                field=edge.target,
                generation=generation,
            )
            return

        options = self._filter(edge.config_filter, options, self._store.values())
        self._apply(edge.target, options, edge.collapse_if_single, edge.priority)

    async def _derive_source(self, source: OptionSource) -> None:
        values = self._store.values()
        try:
            options = await source.loader(values)
        except EventFormError as e:
            self._logger.warning("option_source_failed", field=source.field, error=e.message)
            self._set_options(source.field, [])
            return
        except Exception as e:
            self._logger.error(
                "option_source_error",
                field=source.field,
                error=str(e),
                exc_info=True,
            )
            self._set_options(source.field, [])
            return

        options = self._filter(source.config_filter, options, self._store.values())
        current = self._store.get_value(source.field) or ""
        if current and len(options) != 1 and all(o.value != current for o in options):
            self._store.update_field(source.field, "")
        self._apply(source.field, options, source.collapse_if_single, source.priority)

    def _filter(
        self,
        config_filter: OptionFilter | None,
        options: list[Option],
        values: Values,
    ) -> list[Option]:
        if config_filter is None:
            return list(options)
        return list(config_filter(list(options), values))

    def _apply(
        self,
        key: str,
        options: list[Option],
        collapse_if_single: bool,
        priority: Iterable[str],
    ) -> None:
        if not options:
            self._logger.warning("cascade_no_options", field=key)
            self._set_options(key, [])
            self._store.set_field_visibility(key, False)
            return

        ordered = sort_by_priority(mark_priority(options, list(priority)))

        if len(ordered) == 1 and collapse_if_single:
            only = ordered[0]
            self._set_options(key, ordered)
            self._store.set_field_visibility(key, False)
            self._store.set_field_disabled(key, True)
            self._logger.info("cascade_auto_collapsed", field=key, value=only.value)
            self._store.update_field(key, only.value)
            return

        self._set_options(key, ordered)
        self._store.set_field_disabled(key, False)
        self._store.set_field_visibility(key, True)
        self._logger.debug("cascade_options_ready", field=key, count=len(ordered))

    def _set_options(self, key: str, options: list[Option]) -> None:
        if self._options.get(key, []) == options:
            return
        self._options[key] = list(options)
        self._bus.emit(FieldOptionsChanged(key=key, options=tuple(options)))
