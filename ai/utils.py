"""Helpers for the third-party AI services.

This module provides:
1. `chat_completion` - sends a prompt to the OpenAI-compatible chat-completions
   endpoint at OpenRouter and returns the reply text.  Nothing is retried; any
   upstream failure surfaces as `AIServiceError`.
2. `transcribe_audio` - converts an uploaded recording into text with the
   OpenAI speech-to-text API.  Without an `OPENAI_API_KEY` it logs a warning
   and returns a placeholder so the journaling flow still works.
3. `build_summary_prompt` - turns a list of incidents into the pattern
   summary prompt used by the dashboard.
"""

from __future__ import annotations

from typing import Iterable

import openai
from flask import current_app
from openai import OpenAI

SYSTEM_PROMPT = (
    "You are a compassionate AI assistant helping someone document and understand "
    "patterns of abuse. Provide supportive, non-judgmental responses focused on "
    "safety and healing."
)

PLACEHOLDER_TRANSCRIPT = "(Transcription unavailable - speech-to-text is not configured)"


class AIServiceError(Exception):
    """The upstream model could not produce a usable answer."""


class AIConfigurationError(AIServiceError):
    """No API key is configured for the requested service."""


# ----------------------------------------------------------------------------------
# Chat completions
# ----------------------------------------------------------------------------------

def chat_completion(prompt: str, system_prompt: str = SYSTEM_PROMPT, max_tokens: int | None = None) -> str:
    """Return the model's reply to *prompt*."""

    api_key = current_app.config.get("OPENROUTER_API_KEY")
    if not api_key:
        raise AIConfigurationError("AI API key not configured")

    client = OpenAI(api_key=api_key, base_url=current_app.config["OPENROUTER_BASE_URL"])
    try:
        response = client.chat.completions.create(
            model=current_app.config["OPENROUTER_MODEL"],
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens or current_app.config["AI_MAX_TOKENS"],
            extra_headers={"HTTP-Referer": current_app.config["OPENROUTER_REFERER"]},
        )
    except openai.OpenAIError as exc:
        current_app.logger.error("Chat completion request failed: %s", exc)
        raise AIServiceError("Chat completion request failed") from exc

    if not response.choices or not response.choices[0].message.content:
        raise AIServiceError("Empty response from model")
    return response.choices[0].message.content.strip()


# ----------------------------------------------------------------------------------
# Speech to text
# ----------------------------------------------------------------------------------

def transcribe_audio(filename: str, data: bytes) -> str:
    """Transcribe the recording in *data* (named *filename*)."""

    api_key = current_app.config.get("OPENAI_API_KEY")
    if not api_key:
        current_app.logger.warning("Speech-to-text not configured - returning placeholder transcript")
        return PLACEHOLDER_TRANSCRIPT

    client = OpenAI(api_key=api_key)
    try:
        result = client.audio.transcriptions.create(model="whisper-1", file=(filename, data))
    except openai.OpenAIError as exc:
        current_app.logger.error("Transcription request failed: %s", exc)
        raise AIServiceError("Transcription request failed") from exc
    return (result.text or "").strip()


# ----------------------------------------------------------------------------------
# Prompts
# ----------------------------------------------------------------------------------

def build_summary_prompt(incidents: Iterable) -> str:
    entries = []
    for index, incident in enumerate(incidents, start=1):
        rating = f"{incident.safety_rating}/5" if incident.safety_rating else "not rated"
        entries.append(
            f"Entry {index}:\n"
            f"- Date: {incident.date.isoformat()}\n"
            f"- Type: {incident.behavior_type}\n"
            f"- Description: {incident.description}\n"
            f"- Safety Rating: {rating}\n"
            f"- Feelings: {incident.feelings or 'not recorded'}"
        )
    return (
        "Please analyze these incident entries and provide a compassionate summary of "
        "patterns, focusing on safety and healing:\n\n"
        + "\n\n".join(entries)
        + "\n\nPlease provide:\n"
        "1. A summary of behavior patterns\n"
        "2. Safety concerns or trends\n"
        "3. Supportive recommendations for moving forward\n\n"
        "Keep the tone supportive and non-judgmental."
    )
