import asyncio
import threading

import pytest

from core.geolocation import (
    LocationStatus,
    PositionError,
    PositionErrorCode,
    ReportedPositionProvider,
    acquire_location,
    provider_from_report,
)
from models.geo_query_model import Coordinates, LocationReport


class FakeProvider:
    """Resolves or rejects deterministically, counting how often it is asked."""

    def __init__(self, coordinates=None, error=None):
        self.coordinates = coordinates
        self.error = error
        self.calls = 0

    def get_current_position(self, on_success, on_error):
        self.calls += 1
        if self.error is not None:
            on_error(self.error)
        else:
            on_success(self.coordinates)


@pytest.mark.asyncio
async def test_no_provider_is_unsupported():
    outcome = await acquire_location(None)

    assert outcome.status is LocationStatus.UNSUPPORTED
    assert outcome.coordinates is None


@pytest.mark.asyncio
async def test_success_yields_coordinates_and_reads_once():
    provider = FakeProvider(coordinates=Coordinates(latitude=37.77, longitude=-122.41))

    outcome = await acquire_location(provider)

    assert outcome.status is LocationStatus.ACQUIRED
    assert outcome.coordinates == Coordinates(latitude=37.77, longitude=-122.41)
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_error_carries_platform_message():
    provider = FakeProvider(
        error=PositionError(PositionErrorCode.PERMISSION_DENIED, "User denied Geolocation")
    )

    outcome = await acquire_location(provider)

    assert outcome.status is LocationStatus.DENIED
    assert outcome.message == "User denied Geolocation"


@pytest.mark.asyncio
async def test_first_callback_wins():
    class ChattyProvider:
        def get_current_position(self, on_success, on_error):
            on_success(Coordinates(latitude=1.0, longitude=2.0))
            on_error(PositionError(PositionErrorCode.TIMEOUT, "late"))

    outcome = await acquire_location(ChattyProvider())

    assert outcome.status is LocationStatus.ACQUIRED


@pytest.mark.asyncio
async def test_provider_raising_is_reported_as_denied():
    class BrokenProvider:
        def get_current_position(self, on_success, on_error):
            raise RuntimeError("location service crashed")

    outcome = await acquire_location(BrokenProvider())

    assert outcome.status is LocationStatus.DENIED
    assert outcome.message == "location service crashed"


@pytest.mark.asyncio
async def test_callback_from_another_thread():
    class ThreadedProvider:
        def get_current_position(self, on_success, on_error):
            threading.Timer(
                0.01, on_success, args=(Coordinates(latitude=48.85, longitude=2.35),)
            ).start()

    outcome = await asyncio.wait_for(acquire_location(ThreadedProvider()), timeout=2)

    assert outcome.coordinates.latitude == 48.85


def test_provider_from_report_unsupported_is_none():
    assert provider_from_report(LocationReport(supported=False)) is None


@pytest.mark.asyncio
async def test_reported_position_success():
    report = LocationReport(latitude=37.77, longitude=-122.41)

    outcome = await acquire_location(provider_from_report(report))

    assert outcome.status is LocationStatus.ACQUIRED
    assert outcome.coordinates.longitude == -122.41


@pytest.mark.asyncio
async def test_reported_position_error():
    report = LocationReport(error_code=1, error_message="User denied Geolocation")

    outcome = await acquire_location(ReportedPositionProvider(report))

    assert outcome.status is LocationStatus.DENIED
    assert outcome.message == "User denied Geolocation"


@pytest.mark.asyncio
async def test_reported_position_without_data_falls_back_to_unavailable():
    outcome = await acquire_location(ReportedPositionProvider(LocationReport()))

    assert outcome.status is LocationStatus.DENIED
    assert outcome.message == "position unavailable"
