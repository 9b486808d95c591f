"""Device geolocation acquisition.

The probe asks a platform provider for the current position exactly once per
lifetime and exposes the outcome as an immutable :class:`GeolocationState`.
Results arriving after the probe is disposed are ignored.
"""
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from app.core.models import GeolocationState, Position
from app.utils.logging import log_structured

UNSUPPORTED_MESSAGE = "Geolocation is not supported by this browser."
FALLBACK_MESSAGE = "Unable to get current location."

Listener = Callable[[GeolocationState], None]


class GeolocationErrorCode(Enum):
    """Reasons a position request can fail."""
    UNSUPPORTED = 0
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class GeolocationError(Exception):
    """A position request failed."""

    def __init__(self, code: GeolocationErrorCode, message: Optional[str] = None):
        super().__init__(message or "")
        self.code = code
        self.message = message or ""


@dataclass(frozen=True)
class PositionOptions:
    """Request policy passed to the provider."""
    high_accuracy: bool = True
    timeout: float = 10.0  # seconds
    maximum_age: float = 0  # never reuse a cached fix


class GeolocationProvider(ABC):
    """Base class for platform geolocation capabilities."""

    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the platform exposes a geolocation capability at all."""
        pass

    @abstractmethod
    def get_current_position(self, options: PositionOptions) -> "Future[Position]":
        """
        Request the current position.

        Returns:
            Future resolved once with a Position, or failed with a
            GeolocationError.
        """
        pass


class LocationProbe:
    """Requests the device position once and publishes state changes."""

    def __init__(self, provider: GeolocationProvider, options: Optional[PositionOptions] = None):
        self.provider = provider
        self.options = options or PositionOptions()
        self._state = GeolocationState()
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._started = False
        self._disposed = False

    @property
    def state(self) -> GeolocationState:
        return self._state

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self):
        """Activate the probe. Only the first call has any effect."""
        with self._lock:
            if self._started or self._disposed:
                return
            self._started = True

        if not self.provider.is_supported():
            log_structured("warning", "Geolocation capability unavailable")
            self._publish(GeolocationState(error=UNSUPPORTED_MESSAGE, loading=False))
            return

        self._publish(GeolocationState(loading=True))
        log_structured(
            "info",
            "Requesting device position",
            high_accuracy=self.options.high_accuracy,
            timeout=self.options.timeout,
            maximum_age=self.options.maximum_age,
        )
        future = self.provider.get_current_position(self.options)
        future.add_done_callback(self._on_resolved)

    def dispose(self):
        """Tear down; a pending request resolving later has no effect."""
        self._disposed = True
        self._listeners.clear()

    def _on_resolved(self, future: "Future[Position]"):
        if self._disposed:
            return

        if future.cancelled():
            new_state = GeolocationState(error=FALLBACK_MESSAGE, loading=False)
        elif future.exception() is not None:
            error = future.exception()
            if isinstance(error, GeolocationError):
                message = error.message
                if error.code is GeolocationErrorCode.UNSUPPORTED:
                    message = message or UNSUPPORTED_MESSAGE
                code = error.code.name
            else:
                message = str(error)
                code = type(error).__name__
            new_state = GeolocationState(error=message or FALLBACK_MESSAGE, loading=False)
            log_structured("warning", "Device position request failed", code=code, reason=new_state.error)
        else:
            position = future.result()
            new_state = GeolocationState.from_position(position)
            log_structured("info", "Device position acquired", accuracy=position.accuracy)

        self._publish(new_state)

    def _publish(self, state: GeolocationState):
        with self._lock:
            if self._disposed:
                return
            self._state = state
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state)
