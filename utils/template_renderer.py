from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.metadata import APP_TITLE
from core.query_session import SessionView

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    # autoescape: questions and model answers are untrusted text
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_panel(view: SessionView) -> str:
    return get_environment().get_template("_panel.html").render(view=view)


def render_page(session_id: str, view: SessionView) -> str:
    return get_environment().get_template("index.html").render(
        title=APP_TITLE,
        session_id=session_id,
        view=view,
    )
