"""One-shot geolocation acquisition.

The platform capability follows the browser's callback contract:
``get_current_position(on_success, on_error)``. ``acquire_location`` turns
that into a single awaitable so callers (and tests) can substitute any
provider that resolves or rejects deterministically.

Usage:
    outcome = await acquire_location(provider_from_report(report))
    if outcome.status is LocationStatus.ACQUIRED:
        ...
"""

import asyncio
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Optional, Protocol

import structlog

from models.geo_query_model import Coordinates, LocationReport

logger = structlog.get_logger(__name__)


class PositionErrorCode(IntEnum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


@dataclass(frozen=True)
class PositionError:
    code: PositionErrorCode
    message: str


class GeolocationProvider(Protocol):
    def get_current_position(
        self,
        on_success: Callable[[Coordinates], None],
        on_error: Callable[[PositionError], None],
    ) -> None: ...


class LocationStatus(str, Enum):
    ACQUIRED = "acquired"
    UNSUPPORTED = "unsupported"
    DENIED = "denied"


@dataclass(frozen=True)
class LocationOutcome:
    status: LocationStatus
    coordinates: Optional[Coordinates] = None
    message: Optional[str] = None

    @classmethod
    def acquired(cls, coordinates: Coordinates) -> "LocationOutcome":
        return cls(status=LocationStatus.ACQUIRED, coordinates=coordinates)

    @classmethod
    def unsupported(cls) -> "LocationOutcome":
        return cls(status=LocationStatus.UNSUPPORTED)

    @classmethod
    def denied(cls, message: str) -> "LocationOutcome":
        return cls(status=LocationStatus.DENIED, message=message)


async def acquire_location(
    provider: Optional[GeolocationProvider],
) -> LocationOutcome:
    """Read the current position exactly once. No retry, no timeout.

    ``None`` stands for a platform without the capability. The first callback
    to fire settles the outcome; anything the provider reports afterwards is
    ignored.
    """
    if provider is None:
        logger.info("location_unsupported")
        return LocationOutcome.unsupported()

    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def _settle(outcome: LocationOutcome) -> None:
        if not future.done():
            future.set_result(outcome)

    def _on_success(coordinates: Coordinates) -> None:
        loop.call_soon_threadsafe(_settle, LocationOutcome.acquired(coordinates))

    def _on_error(error: PositionError) -> None:
        loop.call_soon_threadsafe(_settle, LocationOutcome.denied(error.message))

    try:
        provider.get_current_position(_on_success, _on_error)
    except Exception as e:
        logger.warning("location_provider_failed", error=str(e))
        _settle(LocationOutcome.denied(str(e)))

    outcome = await future
    if outcome.status is LocationStatus.ACQUIRED:
        logger.info(
            "location_acquired",
            latitude=outcome.coordinates.latitude,
            longitude=outcome.coordinates.longitude,
        )
    else:
        logger.info("location_denied", message=outcome.message)
    return outcome


class ReportedPositionProvider:
    """Replays the browser's own geolocation read through the callback contract."""

    def __init__(self, report: LocationReport):
        self.report = report

    def get_current_position(
        self,
        on_success: Callable[[Coordinates], None],
        on_error: Callable[[PositionError], None],
    ) -> None:
        report = self.report
        if report.latitude is not None and report.longitude is not None and report.error_code is None:
            on_success(Coordinates(latitude=report.latitude, longitude=report.longitude))
            return

        try:
            code = PositionErrorCode(report.error_code)
        except ValueError:
            code = PositionErrorCode.POSITION_UNAVAILABLE
        on_error(PositionError(code=code, message=report.error_message or code.name.replace("_", " ").lower()))


def provider_from_report(report: LocationReport) -> Optional[GeolocationProvider]:
    if not report.supported:
        return None
    return ReportedPositionProvider(report)
