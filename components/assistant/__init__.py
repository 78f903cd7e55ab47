"""Assistant component: answers questions using the bridged park tools."""

from .agent import DEFAULT_INSTRUCTIONS, AssistantAgent, ParkAssistantAgent

__all__ = ["DEFAULT_INSTRUCTIONS", "AssistantAgent", "ParkAssistantAgent"]
