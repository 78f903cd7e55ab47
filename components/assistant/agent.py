"""Park assistant: a LiteLLM chat loop that uses the bridge's discovered tools."""

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from components.tool_bridge import ToolBridge, ToolInvocationError
from litellm import acompletion
from park_knowledge.config import GenerationModelConfig

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = (
    "You are a knowledgeable national park assistant.\n"
    "Answer questions about US national parks accurately and concisely.\n"
    "If you don't know the answer, say so honestly."
)


class AssistantAgent(Protocol):
    """Protocol for question-answering agents used by the HTTP layer."""

    async def ask(self, question: str) -> str:
        """Answer a question in one piece."""
        ...

    def ask_streaming(self, question: str) -> AsyncIterator[str]:
        """Answer a question as incrementally produced fragments."""
        ...


class ParkAssistantAgent:
    """Answers park questions, grounding them through the search tool."""

    def __init__(
        self,
        config: GenerationModelConfig,
        bridge: ToolBridge,
        instructions: str = DEFAULT_INSTRUCTIONS,
    ):
        self.config = config
        self.bridge = bridge
        self.instructions = instructions

    def _litellm_kwargs(self) -> Dict[str, Any]:
        extra: Dict[str, Any] = dict(self.config.parameters)
        if self.config.api_base:
            extra["api_base"] = self.config.api_base
        if self.config.api_key:
            extra["api_key"] = self.config.api_key
        return extra

    async def _complete(self, messages: List[Dict[str, Any]], **kwargs: Any) -> Any:
        return await acompletion(
            model=self.config.model_name,
            messages=messages,
            **self._litellm_kwargs(),
            **kwargs,
        )

    def _initial_messages(self, question: str) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": self.instructions},
            {"role": "user", "content": question},
        ]

    async def _run_tool_call(self, call: Any) -> Dict[str, Any]:
        """Execute one requested tool call and build the tool message for it."""
        name = call.function.name
        try:
            arguments = json.loads(call.function.arguments or "{}")
            invocation = await self.bridge.invoke(name, arguments)
            content = (
                f"Error: {invocation.text}" if invocation.is_error else invocation.text
            )
        except (json.JSONDecodeError, ToolInvocationError) as e:
            logger.warning(f"Tool call {name} rejected: {e}")
            content = f"Error: {e}"

        return {"role": "tool", "tool_call_id": call.id, "content": content}

    async def _run_tool_rounds(
        self, messages: List[Dict[str, Any]], max_rounds: int
    ) -> Optional[str]:
        """
        Lets the model call tools until it answers on its own.

        Returns:
            The model's answer, or None if every round ended in tool calls. In
            both cases ``messages`` holds the full exchange.
        """
        tools = [descriptor.to_openai_tool() for descriptor in self.bridge.tools]

        for _ in range(max_rounds):
            if tools:
                response = await self._complete(messages, tools=tools)
            else:
                response = await self._complete(messages)
            message = response.choices[0].message
            tool_calls = getattr(message, "tool_calls", None) or []

            if not tool_calls:
                return message.content or ""

            logger.info(
                f"Model requested tools: {', '.join(c.function.name for c in tool_calls)}"
            )
            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in tool_calls
                    ],
                }
            )
            for call in tool_calls:
                messages.append(await self._run_tool_call(call))

        return None

    async def ask(self, question: str) -> str:
        """Answer a question, calling tools as the model requests."""
        logger.info(f"Agent processing question: {question}")
        messages = self._initial_messages(question)

        answer = await self._run_tool_rounds(messages, self.config.max_tool_rounds)
        if answer is None:
            response = await self._complete(messages)
            answer = response.choices[0].message.content or ""

        logger.info("Agent completed response")
        return answer

    async def ask_streaming(self, question: str) -> AsyncIterator[str]:
        """
        Answer a question as a stream of text fragments.

        One tool round runs first; once tool results are in, the final answer
        is streamed token by token.
        """
        logger.info(f"Agent streaming answer to: {question}")
        messages = self._initial_messages(question)

        answer = await self._run_tool_rounds(messages, max_rounds=1)
        if answer is not None:
            if answer:
                yield answer
            return

        stream = await self._complete(messages, stream=True)
        async for chunk in stream:
            if not chunk.choices:
                continue
            fragment = getattr(chunk.choices[0].delta, "content", None)
            if fragment:
                yield fragment
