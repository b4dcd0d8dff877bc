"""AI summarizer tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from browser_relay.page import AISummarizer, PageDigest
from browser_relay.page.prompts import ANALYSIS_SYSTEM_PROMPT
from browser_relay.page.summarize import FAILED_MESSAGE, UNAVAILABLE_MESSAGE

pytestmark = pytest.mark.asyncio

DIGEST = PageDigest(url="https://example.com", title="Example", content="Body text")


def _mock_client(content="{\"answer\": 42}", side_effect=None):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]

    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return client


async def test_missing_api_key_returns_advisory():
    client = _mock_client()
    summarizer = AISummarizer(api_key="", client=client)

    assert await summarizer.summarize("analyze", DIGEST) == UNAVAILABLE_MESSAGE
    client.chat.completions.create.assert_not_awaited()


async def test_returns_raw_model_text():
    client = _mock_client()
    summarizer = AISummarizer(api_key="test-key", model="gpt-4o-mini", max_tokens=1000, client=client)

    result = await summarizer.summarize("find the answer", DIGEST)

    assert result == '{"answer": 42}'
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 1000
    system, user = kwargs["messages"]
    assert system == {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT}
    assert "Page Title: Example" in user["content"]
    assert "Page URL: https://example.com" in user["content"]
    assert "Body text" in user["content"]
    assert "User Instruction: find the answer" in user["content"]


async def test_call_failure_returns_failure_string():
    client = _mock_client(side_effect=RuntimeError("502 bad gateway"))
    summarizer = AISummarizer(api_key="test-key", client=client)

    assert await summarizer.summarize("analyze", DIGEST) == FAILED_MESSAGE


async def test_empty_choices_returns_failure_string():
    client = _mock_client()
    client.chat.completions.create.return_value.choices = []
    summarizer = AISummarizer(api_key="test-key", client=client)

    assert await summarizer.summarize("analyze", DIGEST) == FAILED_MESSAGE
