# config/prompts.py
"""LLM prompts for bug report extraction."""

from reporter.models.conversation import Message

ANALYSIS_PROMPT_TEMPLATE = """\
Analyze this customer support conversation and extract information about the reported bug.

Conversation:
{conversation}

Respond ONLY with a valid JSON object in the following format (no markdown, no code blocks):
{{
  "title": "Short, descriptive bug title (max 80 characters)",
  "description": "Detailed description of the reported problem",
  "stepsToReproduce": ["Step 1", "Step 2"],
  "severity": "low|medium|high|critical"
}}

If you cannot identify steps to reproduce, use an empty array.
Base the severity on the impact described by the user.
Do not invent information - only extract what is actually stated."""


def format_transcript(messages: list[Message]) -> str:
    """
    Render text messages as "[from]: content" lines, in their original order.

    Args:
        messages: Conversation messages of any type

    Returns:
        Transcript containing only "text" messages
    """
    return "\n".join(
        f"[{msg.from_}]: {msg.content}"
        for msg in messages
        if msg.type == "text"
    )


def format_analysis_prompt(messages: list[Message]) -> str:
    """Embed the transcript in the analysis instructions."""
    return ANALYSIS_PROMPT_TEMPLATE.format(conversation=format_transcript(messages))
