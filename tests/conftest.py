"""Pytest configuration and fixtures."""
from concurrent.futures import Future
from unittest.mock import Mock

import pytest
import requests

from app.core.client import BorewellClient
from app.core.geolocation import GeolocationProvider, LocationProbe, PositionOptions
from app.core.models import FormDraft
from app.core.registration import RegistrationForm


class FakeGeolocationProvider(GeolocationProvider):
    """In-memory provider whose pending request the test resolves."""

    def __init__(self, supported: bool = True):
        self.supported = supported
        self.requests = []

    def is_supported(self) -> bool:
        return self.supported

    def get_current_position(self, options: PositionOptions) -> Future:
        future = Future()
        self.requests.append((options, future))
        return future

    @property
    def pending(self) -> Future:
        return self.requests[-1][1]


def make_response(status_code: int = 200, body=None, json_error: bool = False):
    """Build a fake requests.Response."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def provider():
    return FakeGeolocationProvider()


@pytest.fixture
def probe(provider):
    return LocationProbe(provider)


@pytest.fixture
def session():
    """Fake requests session; set ``session.post.return_value`` per test."""
    fake = Mock(spec=requests.Session)
    fake.post.return_value = make_response(200, {
        "id": 7,
        "latitude": 22.72,
        "longitude": 75.86,
        "predicted_feasible": True,
        "predicted_depth_m": 80,
        "model_version": "v1",
    })
    return fake


@pytest.fixture
def client(session):
    return BorewellClient(base_url="http://registry.test", timeout=5, session=session)


@pytest.fixture
def form(probe, client):
    return RegistrationForm(probe, client)


@pytest.fixture
def valid_draft():
    """Draft that passes every validation rule."""
    return FormDraft(
        latitude="22.720000",
        longitude="75.860000",
        owner_name="  Ramesh Patel ",
        village="Rau",
        block="Indore",
        district="Indore",
    )
