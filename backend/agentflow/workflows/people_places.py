"""People and places extractor.

Two independent pipelines start together from START and converge at END:

1. extract_people_names → map_to_people
2. extract_place_names  → map_to_places

The pipelines write disjoint fields, so their updates merge without
conflict even though they share steps.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Optional, TypedDict

from agentflow.graph import END, START, CompiledGraph, StateField, StateGraph, StateSchema
from agentflow.models import Person, PersonNames, Place, PlaceNames
from agentflow.workflows.people_extractor import (
    DEFAULT_MAPPING_DELAY,
    extract_names,
    names_to_people,
)

logger = logging.getLogger(__name__)

PLACES_PROMPT = (
    "Please extract all place names (cities, countries, locations) "
    "from the following text: \n\n{text}"
)


class PeoplePlacesState(TypedDict, total=False):
    text: str
    names: list[str]
    people: list[Person]
    place_names: list[str]
    places: list[Place]


PEOPLE_PLACES_SCHEMA = StateSchema(
    {
        "text": StateField(str),
        "names": StateField(list),
        "people": StateField(list),
        "place_names": StateField(list),
        "places": StateField(list),
    }
)


async def extract_place_names(state: PeoplePlacesState, extractor: Any) -> dict:
    """Extract place names from ``text`` with a ``PlaceNames`` model."""
    logger.info("→ Extracting place names from text...")
    result: PlaceNames = await extractor.ainvoke(PLACES_PROMPT.format(text=state["text"]))
    logger.info("  ✓ Found %d place names: %s", len(result.place_names), result.place_names)
    return {"place_names": result.place_names}


async def place_names_to_places(state: PeoplePlacesState, delay: float = DEFAULT_MAPPING_DELAY) -> dict:
    logger.info("→ Mapping place names to Place objects...")
    place_names = [name for name in state.get("place_names") or [] if name.strip()]
    if not place_names:
        logger.info("  ⚠ No place names to map")
        return {"places": []}

    await asyncio.sleep(delay)
    places = [Place(id=index, name=name) for index, name in enumerate(place_names, start=1)]
    logger.info("  ✓ Created %d Place objects", len(places))
    return {"places": places}


def build_people_places_graph(
    llm: Any,
    *,
    mapping_delay: float = DEFAULT_MAPPING_DELAY,
    max_steps: Optional[int] = None,
) -> CompiledGraph:
    """Build and compile the two-pipeline extraction graph."""
    people_extractor = llm.with_structured_output(PersonNames)
    place_extractor = llm.with_structured_output(PlaceNames)

    workflow = StateGraph(PEOPLE_PLACES_SCHEMA)
    workflow.add_node("extract_people_names", partial(extract_names, extractor=people_extractor))
    workflow.add_node("extract_place_names", partial(extract_place_names, extractor=place_extractor))
    workflow.add_node("map_to_people", partial(names_to_people, delay=mapping_delay))
    workflow.add_node("map_to_places", partial(place_names_to_places, delay=mapping_delay))
    # Start both extraction pipelines together
    workflow.add_edge(START, "extract_people_names")
    workflow.add_edge(START, "extract_place_names")
    workflow.add_edge("extract_people_names", "map_to_people")
    workflow.add_edge("extract_place_names", "map_to_places")
    # Both pipelines converge at END
    workflow.add_edge("map_to_people", END)
    workflow.add_edge("map_to_places", END)
    return workflow.compile(max_steps=max_steps)
