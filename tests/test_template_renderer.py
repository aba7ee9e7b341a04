from core.query_session import (
    QuerySessionState,
    begin_location_request,
    build_view,
    initial_state,
)
from models.geo_query_model import Coordinates, GroundedResponse
from utils.template_renderer import render_page, render_panel

SF = Coordinates(latitude=37.77, longitude=-122.41)


def test_panel_shows_spinner_not_error_while_loading():
    html = render_panel(build_view(begin_location_request(initial_state())))

    assert 'class="loading"' in html
    assert "Requesting location permissions..." in html
    assert 'role="alert"' not in html
    assert "disabled" in html


def test_panel_renders_answer_and_cards():
    response = GroundedResponse(
        text="Try Blue Bottle",
        sources=[
            {
                "maps": {
                    "title": "Blue Bottle",
                    "uri": "https://maps.google.com/?cid=1",
                    "placeAnswerSources": [
                        {"reviewSnippets": [{"uri": "https://maps.google.com/r/1", "text": "Great coffee"}]}
                    ],
                }
            },
            {"maps": {"title": "Sightglass", "uri": "https://maps.google.com/?cid=2"}},
        ],
    )
    html = render_panel(build_view(QuerySessionState(location=SF, response=response)))

    assert "Try Blue Bottle" in html
    assert "Sources from Google Maps" in html
    assert html.count('class="source-card"') == 2
    assert html.count('class="snippet"') == 1
    assert "Read full review" in html
    assert 'rel="noopener noreferrer"' in html


def test_panel_escapes_untrusted_text():
    response = GroundedResponse(text="<script>alert(1)</script>")
    state = QuerySessionState(location=SF, query="<b>hi</b>", response=response)

    html = render_panel(build_view(state))

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;hi&lt;/b&gt;" in html


def test_panel_shows_error_banner_when_idle():
    state = QuerySessionState(location=SF, query="coffee", error="quota exceeded")

    html = render_panel(build_view(state))

    assert 'role="alert"' in html
    assert "quota exceeded" in html
    assert 'class="loading"' not in html


def test_page_embeds_session_and_panel():
    html = render_page("abc123", build_view(begin_location_request(initial_state())))

    assert "/api/ds/geo/sessions/abc123" in html
    assert 'id="query-form"' in html
    assert "GeoWorld Finder" in html
