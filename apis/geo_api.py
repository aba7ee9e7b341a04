from typing import Optional

from fastapi import APIRouter, Body
from structlog import get_logger

from core.query_session import QuerySessionState, build_view, phase
from exceptions.custom_exceptions import BusinessValidationException
from models.geo_query_model import (
    Coordinates,
    GroundedQueryRequest,
    LocationReport,
    SessionQueryRequest,
)
from services import grounded_query_service
from services.geo_session_service import geo_session_service
from utils.response_helpers import success_response
from utils.template_renderer import render_panel

router = APIRouter(prefix="/api/ds/geo", tags=["geo"])
logger = get_logger(__name__)


def session_payload(
    session_id: str, state: QuerySessionState, accepted: Optional[bool] = None
) -> dict:
    view = build_view(state)
    payload = {
        "session_id": session_id,
        "phase": phase(state).value,
        "state": state.model_dump(mode="json"),
        "view": view.model_dump(mode="json"),
        "html": render_panel(view),
    }
    if accepted is not None:
        payload["accepted"] = accepted
    return payload


@router.post("/sessions")
async def create_session():
    session_id, state = geo_session_service.create_session()
    return success_response(session_payload(session_id, state))


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    state = geo_session_service.get_state(session_id)
    return success_response(session_payload(session_id, state))


@router.post("/sessions/{session_id}/location")
async def report_location(session_id: str, report: LocationReport = Body(...)):
    state = await geo_session_service.report_location(session_id, report)
    return success_response(session_payload(session_id, state))


@router.post("/sessions/{session_id}/query")
async def submit_query(session_id: str, payload: SessionQueryRequest = Body(...)):
    state, accepted = await geo_session_service.submit_query(session_id, payload.query)
    return success_response(session_payload(session_id, state, accepted=accepted))


@router.post("/ask")
async def ask(payload: GroundedQueryRequest = Body(...)):
    if not payload.query.strip():
        raise BusinessValidationException("Query must not be empty")

    location = Coordinates(latitude=payload.latitude, longitude=payload.longitude)
    result = await grounded_query_service.get_grounded_response(payload.query, location)
    return success_response(result.model_dump(mode="json"))
