"""
Agent Tools Registry
"""

import ast
import operator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ui_pilot.utils.logger import log_info

ToolFn = Callable[..., Awaitable[Any]]


@dataclass
class Tool:
    """
    A tool offered to the chat model.

    Tools without `execute` need a human to confirm them; their implementation
    lives in the `executions` table and runs once the user approves.
    """

    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    execute: Optional[ToolFn] = None

    @property
    def requires_confirmation(self) -> bool:
        return self.execute is None

    def spec(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def meta(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
            "requires_confirmation": self.requires_confirmation,
        }


class ToolRegistry:
    """Registry for agent tools"""

    def __init__(self):
        self.tools: Dict[str, Tool] = {}
        self.executions: Dict[str, ToolFn] = {}
        self._register_builtin_tools()

    def register_tool(
        self,
        name: str,
        description: str,
        parameters: Dict[str, Any],
        function: Optional[ToolFn] = None,
        confirm: Optional[ToolFn] = None,
    ):
        """Register a tool; pass `confirm` instead of `function` to gate it on approval."""
        self.tools[name] = Tool(
            name=name, description=description, parameters=parameters, execute=function
        )
        if confirm is not None:
            self.executions[name] = confirm

        log_info("Tool registered", name=name, requires_confirmation=function is None)

    def get_tools(self, tool_names: Optional[List[str]] = None) -> Dict[str, Tool]:
        """Get tools by name, or all if None"""
        if tool_names is None:
            return dict(self.tools)

        return {name: tool for name, tool in self.tools.items() if name in tool_names}

    def list_tools(self) -> List[Dict[str, Any]]:
        return [t.meta() for t in self.tools.values()]

    def _register_builtin_tools(self):
        """Register built-in tools"""

        self.register_tool(
            name="getWeatherInformation",
            description="show the weather in a given city to the user",
            parameters=_object_schema(city={"type": "string"}),
            confirm=get_weather_information,
        )

        self.register_tool(
            name="getLocalTime",
            description="get the local time for a specified IANA time zone",
            parameters=_object_schema(timezone={"type": "string"}),
            function=get_local_time,
        )

        self.register_tool(
            name="calculator",
            description="Perform mathematical calculations",
            parameters=_object_schema(expression={"type": "string"}),
            function=calculator,
        )


def _object_schema(**properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(properties)}


async def get_weather_information(city: str = "", **_: Any) -> str:
    return f"The weather in {city} is sunny"


async def get_local_time(timezone: str = "UTC", **_: Any) -> str:
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return f"Unknown time zone: {timezone}"
    return datetime.now(zone).strftime("%H:%M")


MAX_EXPONENT = 100
MAX_OPERAND_BITS = 4096


def _bounded_pow(base, exponent):
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"Exponent too large (max {MAX_EXPONENT})")
    if isinstance(base, int) and base.bit_length() * abs(exponent) > MAX_OPERAND_BITS:
        raise ValueError("Result too large")
    return operator.pow(base, exponent)


_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: _bounded_pow,
    ast.USub: operator.neg,
}


async def calculator(expression: str = "", **_: Any) -> str:
    """Simple calculator tool"""
    try:

        def eval_expr(node):
            if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
                if isinstance(node.value, int) and node.value.bit_length() > MAX_OPERAND_BITS:
                    raise ValueError("Number too large")
                return node.value
            elif isinstance(node, ast.BinOp):
                return _OPS[type(node.op)](eval_expr(node.left), eval_expr(node.right))
            elif isinstance(node, ast.UnaryOp):
                return _OPS[type(node.op)](eval_expr(node.operand))
            else:
                raise ValueError("Unsupported operation")

        node = ast.parse(expression, mode="eval")
        result = eval_expr(node.body)

        return f"Result: {result}"

    except Exception as e:
        return f"Calculation error: {str(e)}"


# Global tool registry
tool_registry = ToolRegistry()
