"""State schema and reducers for graph workflows.

A graph's state is a plain dict whose field set is closed and fixed when the
graph is built.  Every field has exactly one reducer:

- ``overwrite`` (default) — the update replaces the current value.
- ``append``              — the update is concatenated onto the current list.

``StateSchema.merge`` never mutates its inputs; every step produces a new dict.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, TypedDict

from agentflow.exceptions import SchemaViolation

OVERWRITE = "overwrite"
APPEND = "append"
_REDUCERS = (OVERWRITE, APPEND)


@dataclass(frozen=True)
class StateField:
    """Declaration of a single state field.

    ``type`` is checked on overwrite when it is a concrete class; ``None`` is
    always accepted so optional fields can start empty.
    """

    type: Any = object
    reducer: str = OVERWRITE
    default_factory: Optional[Callable[[], Any]] = None

    def __post_init__(self) -> None:
        if self.reducer not in _REDUCERS:
            raise ValueError(f"Unknown reducer '{self.reducer}', expected one of {_REDUCERS}")

    def initial_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return [] if self.reducer == APPEND else None


def append_field() -> StateField:
    """Shorthand for a list field merged with the append reducer."""
    return StateField(type=list, reducer=APPEND)


@dataclass
class StateSchema:
    """Explicit registry of the fields a graph's state may hold."""

    fields: dict[str, StateField] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError("StateSchema needs at least one field")

    @property
    def field_names(self) -> list[str]:
        return list(self.fields)

    def reducer_for(self, name: str) -> str:
        return self.fields[name].reducer

    def initial_state(self) -> dict[str, Any]:
        """Return a state with every field at its declared default."""
        return {name: spec.initial_value() for name, spec in self.fields.items()}

    def validate_keys(self, partial: Mapping[str, Any]) -> None:
        unknown = [key for key in partial if key not in self.fields]
        if unknown:
            raise SchemaViolation(
                f"Undeclared state field(s) {unknown}; declared fields are {self.field_names}",
                unknown,
            )

    def merge(self, current: Mapping[str, Any], partial: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        """Apply ``partial`` onto ``current`` using each field's reducer.

        Raises:
            SchemaViolation: ``partial`` names an undeclared field or carries a
                value of the wrong type.  ``current`` is left untouched.
        """
        if partial is None:
            return dict(current)
        if not isinstance(partial, Mapping):
            raise SchemaViolation(
                f"State update must be a mapping, got {type(partial).__name__}"
            )
        self.validate_keys(partial)

        merged = dict(current)
        for name, value in partial.items():
            spec = self.fields[name]
            if spec.reducer == APPEND:
                merged[name] = list(current.get(name) or []) + _as_list(value)
            else:
                self._check_type(name, spec, value)
                merged[name] = value
        return merged

    def merge_many(
        self,
        current: Mapping[str, Any],
        partials: Iterable[tuple[str, Optional[Mapping[str, Any]]]],
    ) -> dict[str, Any]:
        """Merge the updates produced by several nodes in one step.

        Two writers of the same field have no defined merge order, whatever
        the field's reducer, so that case is rejected.  Updates to disjoint
        fields are applied in the order given.
        """
        writers: dict[str, str] = {}
        merged = dict(current)
        for node_name, partial in partials:
            if partial:
                for name in partial:
                    if name in writers:
                        raise SchemaViolation(
                            f"Field '{name}' written by both '{writers[name]}' and "
                            f"'{node_name}' in the same step",
                            [name],
                        )
                    writers[name] = node_name
            merged = self.merge(merged, partial)
        return merged

    @staticmethod
    def _check_type(name: str, spec: StateField, value: Any) -> None:
        if value is None or not isinstance(spec.type, type) or spec.type is object:
            return
        if not isinstance(value, spec.type):
            raise SchemaViolation(
                f"Field '{name}' expects {spec.type.__name__}, got {type(value).__name__}",
                [name],
            )


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class MessagesState(TypedDict):
    """State for agent graphs that only track the conversation."""

    messages: list


MESSAGES_SCHEMA = StateSchema({"messages": append_field()})
