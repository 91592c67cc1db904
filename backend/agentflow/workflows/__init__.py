"""Example workflows built on the graph engine.

Exports one ``build_*_graph`` factory per workflow; dependencies (model,
search service) are passed in explicitly.
"""

from agentflow.workflows.calculator import build_calculator_graph
from agentflow.workflows.counter import build_counter_graph
from agentflow.workflows.people_extractor import build_people_extractor_graph
from agentflow.workflows.people_places import build_people_places_graph
from agentflow.workflows.web_search import build_web_search_graph

__all__ = [
    "build_counter_graph",
    "build_calculator_graph",
    "build_web_search_graph",
    "build_people_extractor_graph",
    "build_people_places_graph",
]
