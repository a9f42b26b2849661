"""In-process publish/subscribe bus for form events.

Dispatch is synchronous: ``emit`` returns once every matching handler
ran. Handlers for a kind fire in subscription order, kind-wide
subscribers before field-scoped ones. A handler that raises is logged and
does not stop the remaining handlers.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from eventform.events.models import EventKind, FormEvent
from eventform.observability.logging import get_logger

EventHandler = Callable[[FormEvent], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by ``EventBus.subscribe``; pass it to ``unsubscribe``."""

    kind: EventKind | None
    handler: EventHandler
    field: str | None = None
    id: int = 0


class EventBus:
    """Typed event dispatcher shared by the components of one form.

    Subscribing with ``field=`` narrows a subscription to events about a
    single field (``bus.subscribe(EventKind.FIELD_CHANGED, h, field="country")``).
    ``subscribe_all`` receives every event regardless of kind.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or get_logger(__name__)
        self._subscriptions: list[Subscription] = []
        self._next_id = 0

    def subscribe(
        self,
        kind: EventKind,
        handler: EventHandler,
        *,
        field: str | None = None,
    ) -> Subscription:
        """Register a handler for one event kind, optionally scoped to a field."""
        return self._add(kind, handler, field)

    def subscribe_all(self, handler: EventHandler) -> Subscription:
        """Register a handler that receives every event."""
        return self._add(None, handler, None)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns False if it was not registered."""
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            self._logger.warning(
                "event_subscription_not_found",
                kind=subscription.kind.value if subscription.kind else "*",
                field=subscription.field,
            )
            return False
        return True

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to every matching handler."""
        for subscription in self._matching(event):
            try:
                subscription.handler(event)
            except Exception as e:
                self._logger.error(
                    "event_handler_failed",
                    kind=event.kind.value,
                    field=event.field_key,
                    error=str(e),
                    exc_info=True,
                )

    def listener_count(self, kind: EventKind | None = None) -> int:
        """Number of subscriptions for a kind (all subscriptions when None)."""
        if kind is None:
            return len(self._subscriptions)
        return sum(1 for s in self._subscriptions if s.kind == kind)

    def clear(self) -> None:
        self._subscriptions.clear()

    def _add(
        self,
        kind: EventKind | None,
        handler: EventHandler,
        field: str | None,
    ) -> Subscription:
        self._next_id += 1
        subscription = Subscription(kind=kind, handler=handler, field=field, id=self._next_id)
        self._subscriptions.append(subscription)
        return subscription

    def _matching(self, event: FormEvent) -> list[Subscription]:
        # Snapshot so handlers may (un)subscribe while an event is dispatched
        snapshot = list(self._subscriptions)
        broad = [s for s in snapshot if s.field is None and s.kind in (None, event.kind)]
        scoped = [
            s
            for s in snapshot
            if s.field is not None and s.kind == event.kind and s.field == event.field_key
        ]
        return broad + scoped
