"""People extractor.

Given a text:

1. ``extractor`` asks the model for every person name (structured output).
2. ``mapper`` turns the names into ``Person`` objects with 1-based ids.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Optional, TypedDict

from agentflow.graph import END, START, CompiledGraph, StateField, StateGraph, StateSchema
from agentflow.models import Person, PersonNames

logger = logging.getLogger(__name__)

NAMES_PROMPT = "Please extract all person names from the following text: \n\n{text}"
DEFAULT_MAPPING_DELAY = 0.5


class PeopleState(TypedDict, total=False):
    text: str
    names: list[str]
    people: list[Person]


PEOPLE_SCHEMA = StateSchema(
    {
        "text": StateField(str),
        "names": StateField(list),
        "people": StateField(list),
    }
)


async def extract_names(state: PeopleState, extractor: Any) -> dict:
    """Extract person names from ``text`` with a ``PersonNames`` model."""
    logger.info("→ Extracting people names from text...")
    result: PersonNames = await extractor.ainvoke(NAMES_PROMPT.format(text=state["text"]))
    logger.info("  ✓ Found %d people names: %s", len(result.names), result.names)
    return {"names": result.names}


async def names_to_people(state: PeopleState, delay: float = DEFAULT_MAPPING_DELAY) -> dict:
    """Map ``names`` to ``Person`` objects, skipping blank names.

    ``delay`` stands in for a lookup against an external system.
    """
    logger.info("→ Mapping names to Person objects...")
    names = [name for name in state.get("names") or [] if name.strip()]
    if not names:
        logger.info("  ⚠ No names to map")
        return {"people": []}

    await asyncio.sleep(delay)
    people = [Person(id=index, name=name) for index, name in enumerate(names, start=1)]
    logger.info("  ✓ Created %d Person objects", len(people))
    return {"people": people}


def build_people_extractor_graph(
    llm: Any,
    *,
    mapping_delay: float = DEFAULT_MAPPING_DELAY,
    max_steps: Optional[int] = None,
) -> CompiledGraph:
    """Build and compile START → extractor → mapper → END.

    Args:
        llm: Model wrapper exposing ``with_structured_output``.
        mapping_delay: Seconds the mapper waits before building objects.
        max_steps: Optional step cap.
    """
    extractor = llm.with_structured_output(PersonNames)

    workflow = StateGraph(PEOPLE_SCHEMA)
    workflow.add_node("extractor", partial(extract_names, extractor=extractor))
    workflow.add_node("mapper", partial(names_to_people, delay=mapping_delay))
    workflow.add_edge(START, "extractor")
    workflow.add_edge("extractor", "mapper")
    workflow.add_edge("mapper", END)
    return workflow.compile(max_steps=max_steps)
