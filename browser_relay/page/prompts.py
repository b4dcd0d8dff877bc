"""Prompt templates for page analysis."""

ANALYSIS_SYSTEM_PROMPT = (
    "You are a webpage content analysis assistant. Extract useful information "
    "from provided webpage content based on user instructions. Return JSON."
)

ANALYSIS_USER_PROMPT = """\
Page Title: {title}
Page URL: {url}

Page Content:
{content}

User Instruction: {instruction}

Please return structured extracted information.
"""


def format_analysis_prompt(title: str, url: str, content: str, instruction: str) -> str:
    return ANALYSIS_USER_PROMPT.format(
        title=title,
        url=url,
        content=content,
        instruction=instruction,
    )
