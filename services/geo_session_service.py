from typing import Tuple

from structlog import get_logger

from core.geolocation import acquire_location, provider_from_report
from core.query_session import (
    QuerySessionState,
    apply_location_outcome,
    begin_location_request,
    begin_submission,
    can_submit,
    initial_state,
    settle_submission,
    update_query,
)
from exceptions.custom_exceptions import LocationAlreadyResolvedException
from models.geo_query_model import DispatchFailure, LocationReport
from services import grounded_query_service
from services.session_manager import SessionStore, session_store

logger = get_logger(__name__)


class GeoSessionService:
    """Drives stored sessions through the query_session transitions."""

    def __init__(self, store: SessionStore = session_store):
        self.store = store

    def create_session(self) -> Tuple[str, QuerySessionState]:
        state = begin_location_request(initial_state())
        session_id = self.store.create(state)
        logger.info("session_created", session_id=session_id)
        return session_id, state

    def get_state(self, session_id: str) -> QuerySessionState:
        return self.store.get(session_id)

    async def report_location(
        self, session_id: str, report: LocationReport
    ) -> QuerySessionState:
        state = self.store.get(session_id)
        if state.location_settled:
            raise LocationAlreadyResolvedException()

        outcome = await acquire_location(provider_from_report(report))

        # re-read: the store is the single owner of the latest state
        state = apply_location_outcome(self.store.get(session_id), outcome)
        self.store.save(session_id, state)
        logger.info(
            "location_settled",
            session_id=session_id,
            status=outcome.status.value,
        )
        return state

    async def submit_query(
        self, session_id: str, query: str
    ) -> Tuple[QuerySessionState, bool]:
        """Returns the resulting state and whether the submission was accepted."""
        stored = self.store.get(session_id)
        if stored.loading:
            # the in-flight submission owns the state, query text included
            logger.info("submission_ignored", session_id=session_id, loading=True)
            return stored, False

        state = update_query(stored, query)

        if not can_submit(state):
            self.store.save(session_id, state)
            logger.info(
                "submission_ignored",
                session_id=session_id,
                has_location=state.location is not None,
                blank_query=not state.query.strip(),
            )
            return state, False

        state = begin_submission(state)
        self.store.save(session_id, state)
        logger.info("submission_started", session_id=session_id)

        outcome = await grounded_query_service.dispatch_query(state.query, state.location)

        state = settle_submission(self.store.get(session_id), outcome)
        self.store.save(session_id, state)
        if isinstance(outcome, DispatchFailure):
            logger.warning(
                "submission_failed",
                session_id=session_id,
                error_kind=outcome.kind.value,
            )
        else:
            logger.info(
                "submission_answered",
                session_id=session_id,
                source_count=len(outcome.sources),
            )
        return state, True


geo_session_service = GeoSessionService()
