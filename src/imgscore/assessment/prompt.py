"""Prompt templates and tool definitions for model-backed scoring agents.

Each model-backed agent sends one system prompt, one user message (with
the image attached when available), and a single forced tool call named
``submit_scores`` whose parameters are the requested numeric scores.
"""

from __future__ import annotations

from imgscore.adapters.base import ImageAttachment, Message

SCORE_TOOL_NAME = "submit_scores"


SUBJECT_SYSTEM_PROMPT = """You are an expert reviewer of AI-generated marketing images.

Judge how faithfully the image depicts the subject described by its generation prompt. Score on a 0 to 100 scale:

- **0**: The requested subject is absent
- **50**: The subject is partially present or ambiguous
- **100**: The subject is clearly and completely depicted

Use the submit_scores tool to report `subjectScore`."""


SUBJECT_USER_TEMPLATE = """Generation prompt:
{prompt}

Image file name: {image_name}
{image_note}
Report the subject adherence score with the submit_scores tool."""


EXPRESSION_SYSTEM_PROMPT = """You are an expert creative director reviewing AI-generated images and the prompts that produced them.

Score two independent qualities on a 0 to 100 scale:

- **creativityScore**: originality and richness of the creative direction in the prompt
- **moodScore**: how strongly and coherently the prompt conveys an emotional tone or atmosphere

Score each quality independently. Use the submit_scores tool to report both scores."""


EXPRESSION_USER_TEMPLATE = """Generation prompt:
{prompt}

Report creativityScore and moodScore with the submit_scores tool."""


def build_score_tool(fields: dict[str, str]) -> dict:
    """Build the ``submit_scores`` tool definition.

    Args:
        fields: Mapping of score key (e.g. "subjectScore") to description.

    Returns:
        Tool definition dict for BaseAdapter.send_turn(tools=...).
    """
    properties = {
        key: {
            "type": "number",
            "minimum": 0,
            "maximum": 100,
            "description": f"{description} (0-100)",
        }
        for key, description in fields.items()
    }
    return {
        "name": SCORE_TOOL_NAME,
        "description": "Submit numeric quality scores for the image.",
        "parameters": {
            "type": "object",
            "properties": properties,
            "required": list(fields),
        },
    }


SUBJECT_TOOL = build_score_tool(
    {"subjectScore": "How faithfully the image depicts the prompt's subject"}
)

EXPRESSION_TOOL = build_score_tool(
    {
        "creativityScore": "Creativity of the prompt's direction",
        "moodScore": "Strength and coherence of the conveyed mood",
    }
)


def build_subject_messages(
    prompt: str,
    image_name: str,
    image: ImageAttachment | None = None,
) -> list[Message]:
    image_note = (
        "The generated image is attached.\n"
        if image is not None
        else "The image itself is unavailable; judge from the file name.\n"
    )
    user = SUBJECT_USER_TEMPLATE.format(
        prompt=prompt, image_name=image_name, image_note=image_note
    )
    return [
        Message(role="system", content=SUBJECT_SYSTEM_PROMPT),
        Message(role="user", content=user, images=[image] if image else []),
    ]


def build_expression_messages(prompt: str) -> list[Message]:
    return [
        Message(role="system", content=EXPRESSION_SYSTEM_PROMPT),
        Message(role="user", content=EXPRESSION_USER_TEMPLATE.format(prompt=prompt)),
    ]


def format_tool_choice(provider_name: str, tool_name: str) -> dict:
    """Return the provider-specific extras that force a tool call.

    Unknown providers get no tool_choice and rely on the prompt alone.
    """
    lower = provider_name.lower()

    if "openai" in lower:
        return {
            "tool_choice": {
                "type": "function",
                "function": {"name": tool_name},
            }
        }

    if "anthropic" in lower:
        return {"tool_choice": {"type": "tool", "name": tool_name}}

    return {}
