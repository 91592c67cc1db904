"""Tool definition with an explicit argument table.

Arguments are declared up front as ``name -> type`` (or ``name -> (type,
description)``).  A strict pydantic model is built from that table, so a
string ``"2"`` is rejected where a number is declared and unknown arguments
are refused.
"""

import inspect
import logging
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from agentflow.exceptions import ArgumentValidationError

logger = logging.getLogger(__name__)

Number = Union[int, float]
ArgSpec = Union[Any, Tuple[Any, str]]


def _build_args_model(tool_name: str, args: Mapping[str, ArgSpec]) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for arg_name, spec in args.items():
        if isinstance(spec, tuple):
            arg_type, description = spec
        else:
            arg_type, description = spec, None
        fields[arg_name] = (arg_type, Field(..., description=description))

    model_name = "".join(part.capitalize() for part in tool_name.split("_")) + "Args"
    return create_model(
        model_name,
        __config__=ConfigDict(strict=True, extra="forbid"),
        **fields,
    )


class Tool:
    """A named, schema-validated callable that a model can request."""

    def __init__(
        self,
        name: str,
        description: str,
        args: Mapping[str, ArgSpec],
        func: Callable[..., Any],
    ) -> None:
        if not name:
            raise ValueError("Tool name must not be empty")
        self.name = name
        self.description = description
        self.func = func
        self.args_schema = _build_args_model(name, args)

    def __repr__(self) -> str:
        return f"Tool(name={self.name!r})"

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        """Validate raw call arguments and return them as keyword arguments.

        Raises:
            ArgumentValidationError: A required argument is missing, has the
                wrong type, or is not declared.
        """
        try:
            validated = self.args_schema.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise ArgumentValidationError(self.name, exc.errors()) from exc
        return dict(validated)

    async def ainvoke(self, arguments: Optional[Mapping[str, Any]]) -> Any:
        """Validate ``arguments`` and run the tool, awaiting it if needed."""
        kwargs = self.validate(arguments)
        logger.debug("Invoking tool %s with %s", self.name, kwargs)
        result = self.func(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    def to_openai_schema(self) -> dict[str, Any]:
        """Function-calling schema accepted by ``bind_tools``."""
        schema = convert_to_openai_tool(self.args_schema)
        schema["function"].update(name=self.name, description=self.description)
        return schema


def tool(
    name: Optional[str] = None,
    *,
    args: Mapping[str, ArgSpec],
    description: Optional[str] = None,
) -> Callable[[Callable[..., Any]], Tool]:
    """Decorator turning a function into a ``Tool``.

    The description defaults to the first paragraph of the docstring.
    """

    def decorator(func: Callable[..., Any]) -> Tool:
        doc = inspect.cleandoc(func.__doc__ or "").split("\n\n")[0].replace("\n", " ")
        return Tool(
            name=name or func.__name__,
            description=description or doc,
            args=args,
            func=func,
        )

    return decorator
