"""Browser geolocation provider for Streamlit pages.

Streamlit reruns the page script on every interaction, so the browser's
asynchronous ``getCurrentPosition`` callback cannot be awaited directly. The
provider renders a ``streamlit-js-eval`` component that evaluates a promise in
the browser; the page calls :meth:`BrowserGeolocationProvider.poll` on every
rerun and the pending future is resolved once the component reports back.
"""
import json
from concurrent.futures import Future
from typing import Any, Callable, Optional

from streamlit_js_eval import streamlit_js_eval

from app.core.geolocation import (
    GeolocationError,
    GeolocationErrorCode,
    GeolocationProvider,
    PositionOptions,
)
from app.core.models import Position

# Error codes follow the browser's GeolocationPositionError; 0 marks a browser
# without navigator.geolocation.
_JS_TEMPLATE = """
new Promise((resolve) => {{
  if (!("geolocation" in navigator)) {{
    resolve({{ok: false, code: 0, message: ""}});
    return;
  }}
  navigator.geolocation.getCurrentPosition(
    (pos) => resolve({{
      ok: true,
      latitude: pos.coords.latitude,
      longitude: pos.coords.longitude,
      accuracy: pos.coords.accuracy
    }}),
    (err) => resolve({{ok: false, code: err.code, message: err.message || ""}}),
    {options}
  );
}})
"""

ComponentRenderer = Callable[[str, str], Any]


def build_position_script(options: PositionOptions) -> str:
    """JavaScript expression that resolves to a plain-object position report."""
    js_options = json.dumps({
        "enableHighAccuracy": options.high_accuracy,
        "timeout": int(options.timeout * 1000),
        "maximumAge": int(options.maximum_age * 1000),
    })
    return _JS_TEMPLATE.format(options=js_options)


def parse_position_report(report: Any) -> Position:
    """
    Convert the component value into a Position.

    Raises:
        GeolocationError: If the browser reported a failure or the value is
            not a recognisable report.
    """
    if not isinstance(report, dict):
        raise GeolocationError(GeolocationErrorCode.POSITION_UNAVAILABLE)

    if not report.get("ok"):
        try:
            code = GeolocationErrorCode(int(report.get("code", 2)))
        except (TypeError, ValueError):
            code = GeolocationErrorCode.POSITION_UNAVAILABLE
        raise GeolocationError(code, report.get("message") or None)

    try:
        accuracy = report.get("accuracy")
        return Position(
            latitude=float(report["latitude"]),
            longitude=float(report["longitude"]),
            accuracy=float(accuracy) if accuracy is not None else None,
        )
    except (KeyError, TypeError, ValueError):
        raise GeolocationError(GeolocationErrorCode.POSITION_UNAVAILABLE)


def _render_component(script: str, key: str) -> Any:
    return streamlit_js_eval(js_expressions=script, key=key, want_output=True)


class BrowserGeolocationProvider(GeolocationProvider):
    """Geolocation through the user's browser."""

    def __init__(self, key: str = "device_geolocation", renderer: Optional[ComponentRenderer] = None):
        """
        Initialize provider.

        Args:
            key: Streamlit widget key of the evaluation component
            renderer: Callable rendering the component; defaults to streamlit-js-eval
        """
        self.key = key
        self.renderer = renderer or _render_component
        self._script: Optional[str] = None
        self._pending: Optional[Future] = None

    def is_supported(self) -> bool:
        # Capability is only known in the browser; a missing capability is
        # reported back as GeolocationErrorCode.UNSUPPORTED.
        return True

    def get_current_position(self, options: PositionOptions) -> "Future[Position]":
        self._script = build_position_script(options)
        self._pending = Future()
        self._pending.set_running_or_notify_cancel()
        self.poll()
        return self._pending

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def poll(self):
        """Render the component and resolve the pending request if it answered."""
        if not self.pending:
            return

        report = self.renderer(self._script, self.key)
        if report is None:
            return

        future = self._pending
        try:
            position = parse_position_report(report)
        except GeolocationError as e:
            future.set_exception(e)
        else:
            future.set_result(position)
