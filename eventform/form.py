"""Event-registration form facade.

``EventForm`` wires one store, bus, validation engine, resolver and catalog
together for a single form. Every component receives the form's settings
and logger explicitly; only the dataset cache is shared across forms.

Usage:
    form = EventForm.create()
    await form.initialize()
    await form.set_value("department", "91")
    result = form.validate()
    if form.ready_to_submit():
        payload = form.submission_payload()
    await form.close()
"""

from uuid import uuid4

import structlog

from eventform.config import Settings, load_settings
from eventform.data.catalog import DataCatalog
from eventform.data.loader import DataLoader
from eventform.data.models import Option
from eventform.cascade.edges import StandardCascades
from eventform.cascade.resolver import DependencyResolver
from eventform.events.bus import EventBus, Subscription
from eventform.events.models import EventKind, FieldChanged, FormEvent
from eventform.observability.logging import bind_form_logger
from eventform.state.fields import FieldKey, default_field_definitions
from eventform.state.models import FieldDefinition, SystemState
from eventform.state.store import FieldStateStore
from eventform.state.utm import QueryParams, extract_utm_values
from eventform.validation.engine import ValidationEngine, default_validation_engine
from eventform.validation.models import FormValidationResult


class EventForm:
    """One event-registration form instance."""

    def __init__(
        self,
        settings: Settings,
        store: FieldStateStore,
        bus: EventBus,
        validator: ValidationEngine,
        resolver: DependencyResolver,
        catalog: DataCatalog,
        *,
        form_id: str,
        logger: structlog.stdlib.BoundLogger,
        owns_loader: bool = True,
    ) -> None:
        self.settings = settings
        self.store = store
        self.bus = bus
        self.validator = validator
        self.resolver = resolver
        self.catalog = catalog
        self.form_id = form_id
        self.logger = logger
        self._owns_loader = owns_loader
        self._initialized = False

        self._subscriptions: list[Subscription] = [
            self.bus.subscribe(
                EventKind.FIELD_CHANGED,
                self._on_attendee_type_changed,
                field=FieldKey.TYPE_ATTENDEE,
            ),
        ]

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        loader: DataLoader | None = None,
        form_id: str | None = None,
        definitions: list[FieldDefinition] | None = None,
    ) -> "EventForm":
        """Build a form and all of its components.

        Args:
            settings: Form settings (loaded from config files and env if omitted)
            loader: Dataset loader to use (one is created from settings if omitted)
            form_id: Identifier bound to every log line of this form
            definitions: Field schema (the registration form schema if omitted)
        """
        settings = settings or load_settings()
        form_id = form_id or uuid4().hex[:12]
        logger = bind_form_logger(form_id)
        form_defaults = settings.form

        definitions = definitions or default_field_definitions(form_defaults)

        bus = EventBus(logger=logger)
        validator = default_validation_engine(
            required_fields=[d.key for d in definitions if d.required],
            default_country=form_defaults.default_country,
            applicant_type=form_defaults.applicant_type,
            authorization_field=FieldKey.DATA_AUTHORIZATION,
            accepted_authorization=form_defaults.authorization_accepted,
            logger=logger,
        )
        store = FieldStateStore(
            definitions,
            bus,
            validator,
            SystemState(
                dev_mode=form_defaults.dev_mode,
                test_mode=form_defaults.test_mode,
                debug_mode=form_defaults.debug_mode,
            ),
            authorization_field=FieldKey.DATA_AUTHORIZATION,
            accepted_authorization=form_defaults.authorization_accepted,
            logger=logger,
        )

        owns_loader = loader is None
        catalog = DataCatalog(loader or DataLoader(settings.data, logger=logger))

        resolver = DependencyResolver(store, bus, logger=logger)
        cascades = StandardCascades(catalog, settings.filters, form_defaults)
        for source in cascades.sources():
            resolver.add_source(source)
        resolver.add_edges(cascades.edges())

        logger.debug("form_created", fields=len(store.keys))
        return cls(
            settings,
            store,
            bus,
            validator,
            resolver,
            catalog,
            form_id=form_id,
            logger=logger,
            owns_loader=owns_loader,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Load option sources and derive the cascades of the default values."""
        await self.resolver.initialize()
        self._apply_non_applicant_program(self.store.get_value(FieldKey.TYPE_ATTENDEE) or "")
        await self.resolver.wait_idle()
        self._initialized = True
        self.logger.info("form_initialized", summary=self.store.summary().model_dump(exclude={"values"}))

    async def set_value(self, key: str, value: str | None) -> bool:
        """Update a field and wait until its cascades settle."""
        updated = self.store.update_field(key, value)
        await self.resolver.wait_idle()
        return updated

    async def touch(self, key: str) -> bool | None:
        """Mark a field as touched and validate its current value.

        Returns:
            The field's validity, or None for an unknown field
        """
        if not self.store.mark_field_as_touched(key):
            return None
        return self.store.revalidate(key)

    def apply_utm(self, query: QueryParams) -> dict[str, str]:
        """Copy the UTM parameters of a landing-page query into their fields.

        Returns:
            The cleaned values written, keyed by field
        """
        values = extract_utm_values(query)
        for key, value in values.items():
            self.store.update_field(key, value)
        self.logger.info("utm_parameters_applied", fields=sorted(values))
        return values

    def options(self, key: str) -> list[Option]:
        return self.resolver.options(key)

    def validate(self) -> FormValidationResult:
        """Validate the whole form and surface the errors on the fields."""
        system = self.store.system_state()
        result = self.validator.validate_form(
            self.store.states(),
            bypass_authorization=system.dev_mode,
        )
        self.store.apply_validation(result.errors)
        return result

    def ready_to_submit(self) -> bool:
        return self.store.is_ready_to_submit()

    def submission_payload(self) -> dict[str, str]:
        """Non-empty field values handed to the lead transport."""
        return self.store.submission_payload()

    def begin_submission(self) -> dict[str, str] | None:
        """Validate and, if the form may be sent, flag it as submitting.

        Returns:
            The payload to send, or None when submission is blocked
        """
        result = self.validate()
        if not result.is_valid or not self.ready_to_submit():
            self.logger.info(
                "submission_blocked",
                errors=sorted(result.errors),
                missing=result.missing_fields,
            )
            return None
        self.store.set_system_state("is_submitting", True)
        return self.submission_payload()

    def end_submission(self) -> None:
        self.store.set_system_state("is_submitting", False)

    async def reset(self) -> None:
        """Restore defaults and re-derive every cascade."""
        self.store.reset()
        await self.initialize()

    async def close(self) -> None:
        """Detach every bus listener of this form and close the loader it owns."""
        for subscription in self._subscriptions:
            self.bus.unsubscribe(subscription)
        self._subscriptions.clear()
        self.resolver.close()
        if self._owns_loader:
            await self.catalog.loader.close()

    async def __aenter__(self) -> "EventForm":
        if not self._initialized:
            await self.initialize()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def _on_attendee_type_changed(self, event: FormEvent) -> None:
        if isinstance(event, FieldChanged):
            self._apply_non_applicant_program(event.current)

    def _apply_non_applicant_program(self, attendee_type: str) -> None:
        # Runs after the resolver reset the academic fields for this change
        if attendee_type and attendee_type != self.settings.form.applicant_type:
            self.store.update_field(FieldKey.PROGRAM, self.settings.form.non_applicant_program)
