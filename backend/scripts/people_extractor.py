"""People extractor: names from text, then Person objects.

Usage:
    python -m scripts.people_extractor
"""

import sys
from pprint import pprint

from agentflow.config import get_settings
from agentflow.services import ChatModelService
from agentflow.utils import run_script
from agentflow.workflows.people_extractor import build_people_extractor_graph

TEXT = "The team includes Alice, Bob, and Dr. Eve. We also spoke to Carol."


async def main() -> None:
    settings = get_settings()
    graph = build_people_extractor_graph(
        ChatModelService.from_settings(settings),
        max_steps=settings.graph_max_steps,
    )

    print("--- Invoking Graph ---")
    result = await graph.ainvoke({"text": TEXT})

    print("\n--- Final Graph State ---")
    pprint(result)


if __name__ == "__main__":
    sys.exit(run_script(main))
