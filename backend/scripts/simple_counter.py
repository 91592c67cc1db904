"""Countdown to zero.

Usage:
    python -m scripts.simple_counter
"""

import sys
from pprint import pprint

from agentflow.config import get_settings
from agentflow.utils import run_script
from agentflow.workflows.counter import build_counter_graph


async def main() -> None:
    graph = build_counter_graph(max_steps=get_settings().graph_max_steps)
    final_state = await graph.ainvoke({"number": 57, "history": []})
    pprint(final_state)


if __name__ == "__main__":
    sys.exit(run_script(main))
