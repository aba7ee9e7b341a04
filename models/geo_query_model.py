from enum import Enum
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _GroundingModel(BaseModel):
    """Accepts snake_case (SDK dumps) and camelCase (REST payloads) keys alike."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ReviewSnippet(_GroundingModel):
    uri: str = Field(
        default="",
        validation_alias=AliasChoices("uri", "google_maps_uri", "googleMapsUri"),
    )
    text: str = Field(default="", validation_alias=AliasChoices("text", "title", "review"))


class PlaceAnswerSource(_GroundingModel):
    review_snippets: Optional[List[ReviewSnippet]] = None


class MapSource(_GroundingModel):
    title: str = ""
    uri: str = ""
    place_answer_sources: Optional[List[PlaceAnswerSource]] = None

    @field_validator("title", "uri", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("place_answer_sources", mode="before")
    @classmethod
    def _wrap_single_source(cls, value):
        # the Python SDK returns one object where the REST shape has a list
        if isinstance(value, dict):
            return [value]
        return value


class GroundingChunk(_GroundingModel):
    maps: Optional[MapSource] = None


class GroundedResponse(BaseModel):
    text: str = ""
    sources: List[GroundingChunk] = Field(default_factory=list)

    @field_validator("text", mode="before")
    @classmethod
    def _text_none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("sources", mode="before")
    @classmethod
    def _sources_none_to_empty(cls, value):
        return [] if value is None else value

    model_config = {
        "json_schema_extra": {
            "example": {
                "text": "Try Blue Bottle on Mint Plaza.",
                "sources": [
                    {
                        "maps": {
                            "title": "Blue Bottle Coffee",
                            "uri": "https://maps.google.com/?cid=123",
                            "place_answer_sources": None,
                        }
                    }
                ],
            }
        }
    }


class ErrorKind(str, Enum):
    LOCATION_UNSUPPORTED = "location_unsupported"
    LOCATION_DENIED = "location_denied"
    SERVICE_FAILURE = "service_failure"
    UNKNOWN = "unknown"


class DispatchFailure(BaseModel):
    kind: ErrorKind
    message: str


DispatchResult = Union[GroundedResponse, DispatchFailure]


class LocationReport(BaseModel):
    """What the browser observed when it asked navigator.geolocation once."""

    supported: bool = True
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    error_code: Optional[int] = Field(
        default=None, description="W3C PositionError code (1 denied, 2 unavailable, 3 timeout)"
    )
    error_message: Optional[str] = None


class SessionQueryRequest(BaseModel):
    query: str = Field(..., description="Free-text question about the user's surroundings")


class GroundedQueryRequest(BaseModel):
    query: str = Field(..., description="Free-text question about the user's surroundings")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
