# src/sheetscan/utils/response_cleaner.py
"""
Normalization of raw model output before JSON parsing.

Gemini is asked to answer with a bare JSON array but frequently wraps it in a
markdown code fence anyway. Everything here is pure string handling so it can
be tested without the API.
"""

import re

CODE_FENCE = "```"

_JSON_FENCE_RE = re.compile(r"```json\n?")
_FENCE_RE = re.compile(r"```\n?")


def is_fenced(text: str) -> bool:
    """Return True if the text (ignoring surrounding whitespace) opens with a code fence."""
    return text.strip().startswith(CODE_FENCE)


def clean_model_response(text: str) -> str:
    """
    Strip whitespace and, when the response opens with a code fence, remove all
    fence markers so the remaining text can be handed to ``json.loads``.

    Text that does not start with a fence is only stripped; fences found in the
    middle of an unfenced answer are left alone.
    """
    json_text = text.strip()

    if is_fenced(json_text):
        json_text = _JSON_FENCE_RE.sub("", json_text)
        json_text = _FENCE_RE.sub("", json_text)

    return json_text.strip()
