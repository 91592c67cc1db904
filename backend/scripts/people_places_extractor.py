"""People and places extractor: two extraction pipelines over the same text.

Usage:
    python -m scripts.people_places_extractor
"""

import sys

from agentflow.config import get_settings
from agentflow.services import ChatModelService
from agentflow.utils import banner, run_script
from agentflow.workflows.people_places import build_people_places_graph

TEXT = (
    "The team includes Alice, Bob, and Dr. Eve from London. We also spoke to "
    "Carol in Paris. They're planning to visit Tokyo and New York next month."
)


async def main() -> None:
    settings = get_settings()
    print(banner("People and Places Extractor Agent"))

    graph = build_people_places_graph(
        ChatModelService.from_settings(settings),
        max_steps=settings.graph_max_steps,
    )

    print("\nInput text:", TEXT)
    print()

    result = await graph.ainvoke({"text": TEXT})

    print("\n" + banner("Final Result"))
    print("Names extracted:", result["names"])
    print("People created:", result["people"])
    print("\nPlace names extracted:", result["place_names"])
    print("Places created:", result["places"])


if __name__ == "__main__":
    sys.exit(run_script(main))
