"""Presentation state for one query session.

State is an immutable value; every change goes through a transition function
that returns a new state. Nothing here renders or does I/O, so the whole
screen logic can be exercised without a browser.

    AwaitingLocation -> Ready -> Submitting -> (Answered | Failed) -> Submitting ...
    AwaitingLocation -> LocationFailed (terminal until reload)
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from core.geolocation import LocationOutcome, LocationStatus
from exceptions.custom_exceptions import (
    BusinessValidationException,
    LocationAlreadyResolvedException,
)
from models.geo_query_model import (
    Coordinates,
    DispatchFailure,
    ErrorKind,
    GroundedResponse,
    GroundingChunk,
)

REQUESTING_LOCATION_MESSAGE = "Requesting location permissions..."
LOCATION_UNSUPPORTED_MESSAGE = "Geolocation is not supported by this browser."
LOCATION_DENIED_TEMPLATE = (
    "Geolocation error: {message}. "
    "Please enable location services in your browser settings."
)
SEARCHING_MESSAGE = "Searching nearby..."
WAITING_PLACEHOLDER = "Waiting for location..."
READY_PLACEHOLDER = "e.g., What's a good cafe nearby with outdoor seating?"


class SessionPhase(str, Enum):
    AWAITING_LOCATION = "awaiting_location"
    LOCATION_FAILED = "location_failed"
    READY = "ready"
    SUBMITTING = "submitting"
    ANSWERED = "answered"
    FAILED = "failed"


class QuerySessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    loading: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    response: Optional[GroundedResponse] = None
    location: Optional[Coordinates] = None
    location_settled: bool = False


def initial_state() -> QuerySessionState:
    return QuerySessionState()


def begin_location_request(state: QuerySessionState) -> QuerySessionState:
    # the pending notice sits in the error slot; loading keeps it hidden
    return state.model_copy(
        update={"loading": True, "error": REQUESTING_LOCATION_MESSAGE, "error_kind": None}
    )


def apply_location_outcome(
    state: QuerySessionState, outcome: LocationOutcome
) -> QuerySessionState:
    if state.location_settled:
        raise LocationAlreadyResolvedException()

    if outcome.status is LocationStatus.ACQUIRED:
        return state.model_copy(
            update={
                "location": outcome.coordinates,
                "location_settled": True,
                "error": None,
                "error_kind": None,
                "loading": False,
            }
        )

    if outcome.status is LocationStatus.UNSUPPORTED:
        error, kind = LOCATION_UNSUPPORTED_MESSAGE, ErrorKind.LOCATION_UNSUPPORTED
    else:
        error = LOCATION_DENIED_TEMPLATE.format(message=outcome.message or "unknown error")
        kind = ErrorKind.LOCATION_DENIED

    return state.model_copy(
        update={
            "location_settled": True,
            "error": error,
            "error_kind": kind,
            "loading": False,
        }
    )


def update_query(state: QuerySessionState, query: str) -> QuerySessionState:
    return state.model_copy(update={"query": query})


def can_submit(state: QuerySessionState) -> bool:
    return (
        not state.loading
        and state.location is not None
        and state.query.strip() != ""
    )


def begin_submission(state: QuerySessionState) -> QuerySessionState:
    if not can_submit(state):
        raise BusinessValidationException(
            "Submission requires a location, a non-empty question and no request in flight"
        )
    return state.model_copy(
        update={"loading": True, "error": None, "error_kind": None, "response": None}
    )


def settle_submission(
    state: QuerySessionState, outcome: Union[GroundedResponse, DispatchFailure]
) -> QuerySessionState:
    if isinstance(outcome, DispatchFailure):
        return state.model_copy(
            update={
                "loading": False,
                "response": None,
                "error": outcome.message,
                "error_kind": outcome.kind,
            }
        )
    return state.model_copy(
        update={"loading": False, "response": outcome, "error": None, "error_kind": None}
    )


def phase(state: QuerySessionState) -> SessionPhase:
    if state.location is None:
        if state.location_settled:
            return SessionPhase.LOCATION_FAILED
        return SessionPhase.AWAITING_LOCATION
    if state.loading:
        return SessionPhase.SUBMITTING
    if state.response is not None:
        return SessionPhase.ANSWERED
    if state.error is not None:
        return SessionPhase.FAILED
    return SessionPhase.READY


# ---------- View ---------- #

class SnippetView(BaseModel):
    text: str
    uri: str


class SourceCardView(BaseModel):
    title: str
    uri: str
    snippets: List[SnippetView]


class SessionView(BaseModel):
    query: str
    show_error: bool
    error: Optional[str]
    show_loading: bool
    loading_label: str
    input_disabled: bool
    submit_disabled: bool
    submit_label: str
    placeholder: str
    answer: Optional[str]
    source_cards: List[SourceCardView]


def build_source_card(chunk: GroundingChunk) -> Optional[SourceCardView]:
    """Card for one citation; None when the chunk carries no map data."""
    maps = chunk.maps
    if maps is None:
        return None

    snippets: List[SnippetView] = []
    if maps.place_answer_sources:
        review_snippets = maps.place_answer_sources[0].review_snippets or []
        snippets = [SnippetView(text=s.text, uri=s.uri) for s in review_snippets]

    return SourceCardView(title=maps.title, uri=maps.uri, snippets=snippets)


def build_view(state: QuerySessionState) -> SessionView:
    response = state.response
    cards: List[SourceCardView] = []
    if response is not None:
        cards = [
            card for card in (build_source_card(c) for c in response.sources) if card
        ]

    awaiting = state.location is None and not state.location_settled
    return SessionView(
        query=state.query,
        show_error=state.error is not None and not state.loading,
        error=state.error,
        show_loading=state.loading,
        loading_label=REQUESTING_LOCATION_MESSAGE if awaiting else SEARCHING_MESSAGE,
        input_disabled=state.location is None or state.loading,
        submit_disabled=not can_submit(state),
        submit_label="Thinking..." if state.loading else "Ask AI",
        placeholder=WAITING_PLACEHOLDER if state.location is None else READY_PLACEHOLDER,
        answer=response.text if response is not None and response.text else None,
        source_cards=cards,
    )
