"""Data models for the in-process tool bridge."""

from typing import Any, Awaitable, Callable, Dict

from pydantic import BaseModel, ConfigDict, Field

ToolHandler = Callable[..., Awaitable[str]]


class ToolDescriptor(BaseModel):
    """An advertised tool: name, description and JSON input schema."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique tool name")
    description: str = Field(default="", description="Human-readable description")
    input_schema: Dict[str, Any] = Field(
        default_factory=dict, description="JSON schema of the tool arguments"
    )

    def to_openai_tool(self) -> Dict[str, Any]:
        """Render the descriptor in the OpenAI function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }


class ToolInvocation(BaseModel):
    """The outcome of one call through the bridge."""

    tool_name: str = Field(..., description="Name of the invoked tool")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Call input")
    text: str = Field(default="", description="Result text or error message")
    is_error: bool = Field(default=False, description="Whether the tool failed")


class RegisteredTool(BaseModel):
    """A tool as registered on the server side: descriptor plus handler."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    descriptor: ToolDescriptor
    handler: ToolHandler


def single_string_schema(parameter: str, description: str) -> Dict[str, Any]:
    """Input schema with one required string parameter."""
    return {
        "type": "object",
        "properties": {parameter: {"type": "string", "description": description}},
        "required": [parameter],
    }
