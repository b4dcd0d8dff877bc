"""General-purpose agent delegation backed by PydanticAI."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from browser_relay.relay.events import assistant_message

logger = logging.getLogger(__name__)

AGENT_INSTRUCTIONS = (
    "You are an assistant embedded in a browser control panel. "
    "Answer the operator's request directly and concisely."
)


class AgentUnavailableError(RuntimeError):
    """The agent provider could not be constructed."""


class AgentRunner:
    """Runs free-form tasks through a language-model agent.

    ``run_task`` returns an async stream of opaque event mappings: one
    ``text`` event per streamed delta, then a final ``message`` event holding
    the whole answer.
    """

    def __init__(self, api_key: str, provider: str = "openai") -> None:
        if provider != "openai":
            raise AgentUnavailableError(f"Unsupported agent provider: {provider!r}")
        if not api_key:
            raise AgentUnavailableError("OPENAI_API_KEY is not set; the agent cannot be started")
        self._provider = OpenAIProvider(api_key=api_key)

    def build_model(self, model: str) -> Model:
        return OpenAIChatModel(model, provider=self._provider)

    def run_task(self, task: str, model: str) -> AsyncIterator[dict[str, Any]]:
        agent = Agent(self.build_model(model), instructions=AGENT_INSTRUCTIONS)
        logger.info("agent task started", extra={"model": model, "task": task[:100]})
        return self._stream(agent, task)

    async def _stream(self, agent: Agent, task: str) -> AsyncIterator[dict[str, Any]]:
        parts: list[str] = []
        async with agent.run_stream(task) as result:
            async for delta in result.stream_text(delta=True):
                parts.append(delta)
                yield {"type": "text", "content": delta}
            # A method before pydantic-ai 2, a property since.
            usage = result.usage
            if callable(usage):
                usage = usage()

        logger.info(
            "agent task completed",
            extra={
                "requests": usage.requests,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )
        yield assistant_message("".join(parts)).model_dump()
