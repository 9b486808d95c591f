"""Registration form state: device-location reconciliation, validation and submission."""
from typing import Any, Callable, Optional

from app.core.client import BorewellClient, SubmissionError
from app.core.geolocation import LocationProbe
from app.core.models import (
    BorewellPayload,
    FormDraft,
    GeolocationState,
    Outcome,
    Purpose,
    SubmissionResult,
    format_coordinate,
)
from app.core.validation import validate_draft
from app.utils.logging import log_structured

DETECTING_MESSAGE = "Trying to detect device location. Please allow location access."


class RegistrationForm:
    """Owns the draft and the submission lifecycle of one registration page."""

    def __init__(self, probe: LocationProbe, client: BorewellClient, draft: Optional[FormDraft] = None):
        self.probe = probe
        self.client = client
        self.draft = draft or FormDraft()
        self.submitting = False
        self.submit_requested = False
        self.last_error: Optional[str] = None
        self.last_result: Optional[SubmissionResult] = None
        self._unsubscribe: Optional[Callable[[], None]] = probe.subscribe(self.on_probe_update)
        # The probe may already hold a fix from before we subscribed
        self.on_probe_update(probe.state)

    @property
    def geolocation(self) -> GeolocationState:
        return self.probe.state

    @property
    def can_submit(self) -> bool:
        return not (self.submitting or self.submit_requested)

    @property
    def can_use_device_location(self) -> bool:
        return not self.probe.state.loading

    def close(self):
        """Detach from the probe and dispose it."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.probe.dispose()

    def set_field(self, name: str, value: Any):
        """Update one draft field from user input."""
        if not hasattr(self.draft, name):
            raise AttributeError(f"Unknown form field: {name}")
        if name == "purpose":
            value = Purpose(value)
        elif name == "actual_outcome":
            value = Outcome(value)
        elif name == "has_been_drilled":
            value = bool(value)
        setattr(self.draft, name, value)

    def on_probe_update(self, state: GeolocationState):
        """Seed empty coordinate fields from a new device fix.

        Each field is seeded only while it is the empty string, so typed text
        is never overwritten. A field the user clears becomes seedable again.
        """
        if not state.has_fix:
            return
        if self.draft.latitude == "":
            self.draft.latitude = format_coordinate(state.latitude)
        if self.draft.longitude == "":
            self.draft.longitude = format_coordinate(state.longitude)

    def use_device_location(self):
        """Overwrite both coordinate fields with the latest device fix."""
        state = self.probe.state
        if state.has_fix:
            self.draft.latitude = format_coordinate(state.latitude)
            self.draft.longitude = format_coordinate(state.longitude)
            self.last_error = None
        elif state.error:
            self.last_error = state.error
        else:
            self.last_error = DETECTING_MESSAGE

    def request_submit(self):
        """Queue a submission for the next page pass.

        The page draws the submit control disabled while a request is queued
        or running, then calls :meth:`run_requested_submit`.
        """
        if self.can_submit:
            self.submit_requested = True

    def run_requested_submit(self) -> Optional[SubmissionResult]:
        """Perform a queued submission, if any."""
        if not self.submit_requested:
            return None
        try:
            return self.submit()
        finally:
            self.submit_requested = False

    def submit(self) -> Optional[SubmissionResult]:
        """
        Validate and send the draft.

        Returns:
            The registry result on success, otherwise None with ``last_error`` set
        """
        if self.submitting:
            return None

        self.last_result = None
        self.last_error = None

        error = validate_draft(self.draft)
        if error:
            self.last_error = error
            log_structured("info", "Registration draft rejected", reason=error)
            return None

        payload = BorewellPayload.from_draft(self.draft)
        self.submitting = True
        try:
            result = self.client.register(payload)
        except SubmissionError as e:
            self.last_result = None
            self.last_error = e.message
            return None
        finally:
            self.submitting = False

        self.last_result = result
        self.last_error = None
        return result
