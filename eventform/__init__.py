"""eventform: reactive field-state engine for event-registration forms.

Keeps form values consistent, resolves cascading dependent fields
(country -> department -> city, academic level -> faculty -> program ->
period), validates input, and loads reference datasets from remote JSON
with fallback URLs and a shared TTL cache.

Usage:
    from eventform import EventForm

    form = EventForm.create()
    await form.initialize()
    await form.set_value("department", "11")
"""

from eventform.form import EventForm

__all__ = ["EventForm"]
