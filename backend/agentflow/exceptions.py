"""Error taxonomy shared by the graph engine, the tool dispatcher and the services.

Every error unwinds the whole invocation; there is no partial-result recovery.
"""

from typing import Any, Iterable, Optional


class AgentFlowError(Exception):
    """Base class for all errors raised by agentflow."""


class GraphConfigurationError(AgentFlowError):
    """The graph wiring is invalid (raised while building or compiling)."""


class SchemaViolation(AgentFlowError):
    """A state update or tool argument does not match its declared schema."""

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.fields = list(fields)


class ArgumentValidationError(SchemaViolation):
    """Tool arguments failed validation against the tool's argument table."""

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]) -> None:
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in errors]
        details = "; ".join(
            f"{field or '<root>'}: {err.get('msg', 'invalid')}"
            for field, err in zip(fields, errors)
        )
        super().__init__(f"Invalid arguments for tool '{tool_name}': {details}", fields)
        self.tool_name = tool_name
        self.errors = errors


class RoutingError(AgentFlowError):
    """A router returned a destination outside its declared set."""

    def __init__(self, source: str, destination: Any, allowed: Iterable[str]) -> None:
        self.source = source
        self.destination = destination
        self.allowed = list(allowed)
        super().__init__(
            f"Router on '{source}' returned {destination!r}, "
            f"expected one of {self.allowed}"
        )


class UnknownToolError(AgentFlowError):
    """A tool call named a tool that is not registered."""

    def __init__(self, tool_name: str, available: Iterable[str] = ()) -> None:
        self.tool_name = tool_name
        self.available = list(available)
        super().__init__(
            f"Unknown tool '{tool_name}'. Registered tools: {self.available}"
        )


class ExternalCallFailure(AgentFlowError):
    """A model, search or node call failed or timed out."""

    def __init__(self, service: str, message: str, *, timeout: Optional[float] = None) -> None:
        self.service = service
        self.timeout = timeout
        super().__init__(f"{service}: {message}")


class StepLimitExceeded(AgentFlowError):
    """The configured maximum number of steps was reached before END."""

    def __init__(self, max_steps: int) -> None:
        self.max_steps = max_steps
        super().__init__(f"Graph did not reach END within {max_steps} step(s)")
