"""Structured-output models requested from the chat model."""

from pydantic import BaseModel, Field


class PersonNames(BaseModel):
    """Person names found in a text."""

    names: list[str] = Field(
        default_factory=list,
        description="A list of person names extracted from the text.",
    )


class PlaceNames(BaseModel):
    """Place names found in a text."""

    place_names: list[str] = Field(
        default_factory=list,
        description="A list of place names (cities, countries, locations) extracted from the text.",
    )
