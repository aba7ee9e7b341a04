from datetime import datetime, timedelta, timezone

import pytest

from core.query_session import initial_state, update_query
from exceptions.custom_exceptions import SessionNotFoundException
from services.session_manager import SessionStore


def test_save_and_get_round_trip():
    store = SessionStore()
    session_id = store.create(initial_state())

    store.save(session_id, update_query(initial_state(), "coffee"))

    assert store.get(session_id).query == "coffee"


def test_save_unknown_session_raises():
    with pytest.raises(SessionNotFoundException):
        SessionStore().save("missing", initial_state())


def test_remove_expired_only_drops_idle_sessions():
    store = SessionStore(timeout=timedelta(minutes=30))
    old = store.create(initial_state())
    fresh = store.create(initial_state())
    store._sessions[old]["last_activity"] = datetime.now(timezone.utc) - timedelta(hours=1)

    removed = store.remove_expired()

    assert removed == 1
    assert len(store) == 1
    assert store.get(fresh) is not None
    with pytest.raises(SessionNotFoundException):
        store.get(old)
