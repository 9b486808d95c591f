"""HTTP client for the borewell registry service."""
from typing import Optional

import requests

from app.core.config import API_BASE_URL, REGISTER_PATH, REQUEST_TIMEOUT
from app.core.models import BorewellPayload, SubmissionResult
from app.utils.logging import log_structured, log_error
from app.utils.timing import Timer

FALLBACK_ERROR_MESSAGE = "Registration failed. Please try again."


class SubmissionError(Exception):
    """Registration request failed; ``message`` is shown to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_detail(response: requests.Response) -> Optional[str]:
    """Return the server's ``detail`` string from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return None


class BorewellClient:
    """Client for registering borewells."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize client.

        Args:
            base_url: Service base address (defaults to API_BASE_URL from config)
            timeout: Request timeout in seconds (defaults to REQUEST_TIMEOUT)
            session: Optional requests session to reuse connections
        """
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self.session = session or requests.Session()

    @property
    def register_url(self) -> str:
        return f"{self.base_url}{REGISTER_PATH}"

    def register(self, payload: BorewellPayload) -> SubmissionResult:
        """
        Submit a borewell record.

        Args:
            payload: Validated request body

        Returns:
            Parsed registry response

        Raises:
            SubmissionError: On transport failure, non-success status, or an
                unusable response body
        """
        log_structured(
            "info",
            "Submitting borewell registration",
            url=self.register_url,
            has_been_drilled=payload.has_been_drilled,
            purpose=payload.purpose.value,
        )

        try:
            with Timer("register_borewell"):
                response = self.session.post(
                    self.register_url,
                    json=payload.to_dict(),
                    timeout=self.timeout
                )
        except requests.exceptions.RequestException as e:
            log_error(e, {"module": "client", "function": "register", "url": self.register_url})
            raise SubmissionError(FALLBACK_ERROR_MESSAGE) from e

        if not response.ok:
            message = extract_detail(response) or FALLBACK_ERROR_MESSAGE
            log_structured(
                "warning",
                "Borewell registration rejected",
                status_code=response.status_code,
                reason=message,
            )
            raise SubmissionError(message, status_code=response.status_code)

        try:
            result = SubmissionResult.from_dict(response.json())
        except (TypeError, ValueError) as e:
            log_error(e, {"module": "client", "function": "register", "status_code": response.status_code})
            raise SubmissionError(FALLBACK_ERROR_MESSAGE, status_code=response.status_code) from e

        log_structured(
            "info",
            "Borewell registered",
            borewell_id=result.id,
            model_version=result.model_version,
            predicted_feasible=result.predicted_feasible,
        )
        return result
