from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from core.metadata import SERVICE_NAME, VERSION
from core.query_session import build_view
from services.geo_session_service import geo_session_service
from utils.template_renderer import render_page

router = APIRouter(tags=["page"])


@router.get("/", response_class=HTMLResponse)
async def index():
    # every page load is a fresh session
    session_id, state = geo_session_service.create_session()
    return HTMLResponse(content=render_page(session_id, build_view(state)))


@router.get("/api/ds/health")
async def health():
    return {"status": "ok", "service": SERVICE_NAME, "version": VERSION}
