from functools import lru_cache
from typing import Optional

from google import genai
from google.genai import types

from config.app_config import AppConfig, get_api_key


@lru_cache(maxsize=4)
def _client_for(api_key: Optional[str]) -> genai.Client:
    return genai.Client(api_key=api_key)


def get_client() -> genai.Client:
    return _client_for(get_api_key())


def build_maps_grounding_config(
    latitude: float, longitude: float
) -> types.GenerateContentConfig:
    """Enable the Google Maps tool and scope its retrieval to a lat/lng."""
    return types.GenerateContentConfig(
        tools=[types.Tool(google_maps=types.GoogleMaps())],
        tool_config=types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(latitude=latitude, longitude=longitude),
            ),
        ),
    )


async def generate_grounded_content(
    prompt: str,
    latitude: float,
    longitude: float,
    model: Optional[str] = None,
) -> types.GenerateContentResponse:
    client = get_client()

    response = await client.aio.models.generate_content(
        model=model or AppConfig.GEMINI_MODEL,
        contents=prompt,
        config=build_maps_grounding_config(latitude, longitude),
    )

    return response
