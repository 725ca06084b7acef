"""Prompt templates used by the interview gateway."""
from __future__ import annotations

from textwrap import dedent
from typing import Dict, Iterable

from ..memory import Message
from ..phases import ExperienceLevel, Phase, phase_label

TONES: Dict[ExperienceLevel, str] = {
    ExperienceLevel.beginner: "encouraging, educational, and guiding",
    ExperienceLevel.intermediate: "professional and structured",
    ExperienceLevel.expert: "concise, technical, and direct",
}

SKIP_MESSAGE = "I'm not sure, let's skip this part and use your best judgment."
EMPTY_REPLY = "I didn't catch that."
CONNECT_FAILED = "Sorry, I'm having trouble connecting. Please refresh and try again."
TURN_FAILED = "I encountered an error. Please try again."
DOCUMENT_FAILED = "I couldn't generate the spec just yet. Let's chat a bit more."

_INTERVIEW_TEMPLATE = dedent(
    """
    You are an expert Senior Product Manager conducting a rapid 3-minute scoping interview with a user (ID: {user_id}).
    Your goal is to clarify their product idea to generate a "Product Spec Doc".

    Tone: {tone}.

    The interview has 4 strict phases. You must stay in the current phase until you have just enough info, then move on.

    Phases:
    1. Idea & Goals: Clarify the core problem.
    2. Users & Value: Define personas and the main outcome/value prop.
    3. Core Features: List 3-5 distinct features.
    4. Validation/Flows: Walk through the "Happy Path" user flow.

    Rules:
    - Ask only ONE focused question at a time.
    - Keep messages short (under 2 sentences usually).
    - If the user is vague, ask a clarifying question.
    - If the user provides enough info for the phase, acknowledge briefly and move to the next phase question.
    - Do NOT output the spec yet. Just conduct the interview.

    Current Context: The user wants to build: "{idea}".
    Start by welcoming them and asking the first clarifying question about the core problem.
    """
).strip()

_DOCUMENT_TEMPLATE = dedent(
    """
    Based on the following conversation between a PM and a User, generate a structured Product Spec Doc.

    Original Idea: {idea}

    Conversation History:
    {transcript}

    Extract the details accurately. If something wasn't explicitly discussed, infer reasonable defaults based on the context.
    """
).strip()


def tone_for(level: ExperienceLevel | str) -> str:
    return TONES[ExperienceLevel(level)]


def build_system_instruction(user_id: str, idea: str, level: ExperienceLevel | str) -> str:
    return _INTERVIEW_TEMPLATE.format(user_id=user_id, idea=idea, tone=tone_for(level))


def kickoff_message(idea: str) -> str:
    return f'The user is ready. Their idea is: "{idea}". Begin the interview.'


def augment_message(text: str, phase: Phase) -> str:
    """Wire form of a user turn: the stored text plus a hidden steering note."""
    return (
        f"{text}\n[SYSTEM_NOTE: Current Phase: {phase_label(phase)}. "
        "Keep strictly to the 3-minute limit. If you have enough info for this phase, "
        "move to next. If phase is validation, wrap up.]"
    )


def flatten_history(messages: Iterable[Message]) -> str:
    """Render the conversation as ``ROLE: text`` lines."""
    return "\n".join(f"{msg.role.upper()}: {msg.text}" for msg in messages)


def build_document_prompt(transcript: str, idea: str) -> str:
    return _DOCUMENT_TEMPLATE.format(idea=idea, transcript=transcript)
