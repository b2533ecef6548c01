"""Turn free-text chat commands into video request parameters.

Everything here is a pure function over the input text. Unrecognized input
never raises; callers fall back to defaults for whatever was not detected.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from veo_studio.config import settings

logger = logging.getLogger(__name__)

ALLOWED_DURATIONS: Tuple[int, ...] = (88, 60, 180, 300, 600)
DEFAULT_DURATION_SECONDS = 60

LANDSCAPE = "16:9"
PORTRAIT = "9:16"
DEFAULT_ASPECT_RATIO = LANDSCAPE

_SECONDS_UNITS = r"(sec|secs|second|seconds)"
_MINUTES_UNITS = r"(min|mins|minute|minutes)"

_DURATION_PATTERNS = (
    re.compile(r"(\d+)\s*" + _SECONDS_UNITS + r"\b"),
    re.compile(r"(\d+)\s*" + _MINUTES_UNITS + r"\b"),
)

# Matched against lowercased text with all whitespace removed; first rule wins.
_ASPECT_RULES = (
    (re.compile(r"16[:x]?9"), LANDSCAPE),
    (re.compile(r"9[:x]?16"), PORTRAIT),
    (re.compile(r"landscape"), LANDSCAPE),
    (re.compile(r"portrait|vertical"), PORTRAIT),
)

_ASPECT_PHRASE = re.compile(
    r"\b(16\s*[:x]?\s*9|9\s*[:x]?\s*16|landscape|portrait|vertical)\b", re.IGNORECASE
)
_DURATION_PHRASE = re.compile(
    r"\b\d+\s*(sec|secs|second|seconds|min|mins|minute|minutes)\b", re.IGNORECASE
)
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_SEPARATOR = re.compile(r"(\s*[,;]\s*)")
_COMMAND_VERB = re.compile(r"(please\s+)?(make|create|generate|render|produce)", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedCommand:
    prompt: str
    duration_seconds: int
    aspect_ratio: str
    reply: str


def snap_duration(seconds: float) -> int:
    """Return the allowed duration closest to *seconds*.

    Ties go to whichever candidate comes first in ``ALLOWED_DURATIONS``.
    """
    if seconds in ALLOWED_DURATIONS:
        return int(seconds)
    best = ALLOWED_DURATIONS[0]
    best_diff = abs(best - seconds)
    for candidate in ALLOWED_DURATIONS:
        diff = abs(candidate - seconds)
        if diff < best_diff:
            best = candidate
            best_diff = diff
    return best


def parse_duration_seconds(text: str) -> Optional[int]:
    lower = text.lower()
    for pattern in _DURATION_PATTERNS:
        match = pattern.search(lower)
        if not match:
            continue
        seconds = int(match.group(1))
        if match.group(2).startswith("min"):
            seconds *= 60
        return snap_duration(seconds)
    return None


def parse_aspect(text: str) -> Optional[str]:
    compact = re.sub(r"\s+", "", text.lower())
    for pattern, aspect in _ASPECT_RULES:
        if pattern.search(compact):
            return aspect
    return None


def strip_known(text: str) -> str:
    """Remove aspect and duration phrases from *text* and tidy what is left."""
    cleaned, aspect_hits = _ASPECT_PHRASE.subn("", text)
    cleaned, duration_hits = _DURATION_PHRASE.subn("", cleaned)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip()
    if not (aspect_hits or duration_hits):
        return cleaned

    # Split keeps the separators at odd indexes; each fragment keeps the one before it.
    parts = _SEPARATOR.split(cleaned)
    kept = []
    for index in range(0, len(parts), 2):
        fragment = parts[index].strip()
        if fragment:
            kept.append((parts[index - 1] if index else "", fragment))

    if kept and _COMMAND_VERB.fullmatch(kept[0][1]):
        kept = kept[1:]
    if not kept:
        return ""
    return kept[0][1] + "".join(separator + fragment for separator, fragment in kept[1:])


def build_reply(prompt: str, duration_seconds: int, aspect_ratio: str) -> str:
    return (
        f"Okay. I set aspect to {aspect_ratio}, duration to {duration_seconds} seconds. "
        f'Prompt: "{prompt}"'
    )


def parse_command(message: Optional[str]) -> ParsedCommand:
    text = str(message if message is not None else "")[: settings.prompt_char_limit]

    aspect_ratio = parse_aspect(text) or DEFAULT_ASPECT_RATIO
    duration_seconds = parse_duration_seconds(text) or DEFAULT_DURATION_SECONDS
    prompt = strip_known(text) or settings.default_prompt

    logger.debug(
        "Parsed command: aspect=%s duration=%s prompt=%r", aspect_ratio, duration_seconds, prompt
    )
    return ParsedCommand(
        prompt=prompt,
        duration_seconds=duration_seconds,
        aspect_ratio=aspect_ratio,
        reply=build_reply(prompt, duration_seconds, aspect_ratio),
    )
