"""
AI-assisted APAR drafting.

The provider only ever sees the text the employee typed into the form; the
returned draft is handed back to the caller unsaved so it can be reviewed.
"""
import logging

import requests

from perfdesk.core.config import settings
from perfdesk.core.exceptions import AIError, AIKillSwitchError

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"

SYSTEM_PROMPT = (
    "You are an HR writing assistant. Turn an employee's notes into a concise, "
    "professional Annual Performance Appraisal Record (APAR) self-assessment. "
    "Use three short sections titled Achievements, Challenges and Goals. "
    "Do not invent facts that are not in the notes."
)


def call_openrouter(messages: list, temperature: float = 0.7) -> str:
    """
    Send a chat completion request and return the first choice's text.

    Raises:
        ValueError: OPENROUTER_API_KEY is not configured.
        requests.RequestException: transport or HTTP error from the provider.
    """
    if not settings.ai.openrouter_api_key:
        raise ValueError("OPENROUTER_API_KEY is not configured. Set it in the environment.")

    response = requests.post(
        OPENROUTER_URL,
        json={
            "model": settings.ai.model_name,
            "messages": messages,
            "temperature": temperature,
        },
        headers={"Authorization": f"Bearer {settings.ai.openrouter_api_key}"},
        timeout=settings.ai.timeout_seconds,
    )
    response.raise_for_status()
    return response.json()["choices"][0]["message"]["content"]


def build_messages(year: int, period: str, achievements: str, challenges: str, goals: str) -> list:
    notes = (
        f"Appraisal year: {year}\n"
        f"Period: {period}\n\n"
        f"Achievements:\n{achievements.strip()}\n\n"
        f"Challenges:\n{challenges.strip()}\n\n"
        f"Goals:\n{goals.strip()}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": notes},
    ]


def generate_apar_draft(year: int, period: str, achievements: str, challenges: str, goals: str) -> str:
    if settings.ai.kill_switch:
        raise AIKillSwitchError()

    messages = build_messages(year, period, achievements, challenges, goals)
    try:
        draft = call_openrouter(messages, temperature=settings.ai.temperature)
    except ValueError as e:
        logger.error(f"APAR draft provider not configured: {e}")
        raise AIError("AI drafting is not configured") from e
    except (requests.RequestException, KeyError, IndexError) as e:
        logger.error(f"APAR draft generation failed: {e}", exc_info=True)
        raise AIError("Failed to generate draft") from e

    draft = (draft or "").strip()
    if not draft:
        raise AIError("AI provider returned an empty draft")
    return draft
