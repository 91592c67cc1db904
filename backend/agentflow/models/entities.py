"""Entities produced by the extraction workflows."""

from pydantic import BaseModel, Field


class Person(BaseModel):
    """A person mentioned in the input text."""

    id: int = Field(..., ge=1, description="1-based position in extraction order")
    name: str = Field(..., min_length=1)


class Place(BaseModel):
    """A place (city, country, location) mentioned in the input text."""

    id: int = Field(..., ge=1, description="1-based position in extraction order")
    name: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"id": 1, "name": "London"},
        }
    }
