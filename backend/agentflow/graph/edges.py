"""Edge table entries and router evaluation.

Edges connect node names and the two sentinels ``START`` and ``END``.  A
fixed edge always leads to the same destination; a conditional edge asks a
router for the destination and checks it against the declared set.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from agentflow.exceptions import RoutingError

START = "__start__"
END = "__end__"

Router = Callable[[Mapping[str, Any]], str]
Destinations = Union[Sequence[str], Mapping[str, str]]


@dataclass(frozen=True)
class FixedEdge:
    source: str
    destination: str


@dataclass
class ConditionalEdge:
    """A router plus the destinations it is allowed to return.

    ``path_map`` translates router return values into node names.  It is
    built from a mapping as given, or from a list as the identity mapping.
    ``None`` means "any registered node or END", resolved when compiling.
    """

    source: str
    router: Router
    path_map: Optional[dict[str, str]] = field(default=None)

    @classmethod
    def create(cls, source: str, router: Router, destinations: Optional[Destinations]) -> "ConditionalEdge":
        if destinations is None:
            return cls(source, router)
        if isinstance(destinations, Mapping):
            return cls(source, router, dict(destinations))
        return cls(source, router, {name: name for name in destinations})

    def resolve(self, state: Mapping[str, Any]) -> str:
        """Evaluate the router against the current merged state."""
        choice = self.router(state)
        try:
            return self.path_map[choice]
        except (KeyError, TypeError):
            raise RoutingError(self.source, choice, self.path_map or {}) from None


def router_name(router: Router) -> str:
    return getattr(router, "__name__", type(router).__name__)
