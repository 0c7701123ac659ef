"""Anthropic API wrapper used by the advisory gateway."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anthropic
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from tactical_engine.analyzer.constants import (
    ADVISORY_MAX_ATTEMPTS,
    ADVISORY_MAX_TOKENS,
    ADVISORY_TIMEOUT_SECONDS,
    DEFAULT_ADVISORY_MODEL,
)

logger = logging.getLogger(__name__)


class ExternalServiceError(RuntimeError):
    """Raised when the text-generation service cannot produce a response."""


@dataclass(slots=True)
class AdvisorySettings:
    """Runtime knobs for the advisory call."""

    model: str = DEFAULT_ADVISORY_MODEL
    max_tokens: int = ADVISORY_MAX_TOKENS
    timeout_seconds: float = ADVISORY_TIMEOUT_SECONDS
    max_attempts: int = ADVISORY_MAX_ATTEMPTS
    temperature: float = 0.1


def init_anthropic_client(timeout_seconds: float = ADVISORY_TIMEOUT_SECONDS) -> anthropic.Anthropic:
    """Initialize and return an Anthropic client.

    SDK-level retries are disabled; attempts are governed by AdvisorySettings.
    """
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise ValueError("ANTHROPIC_API_KEY environment variable is required")
    return anthropic.Anthropic(api_key=api_key, timeout=timeout_seconds, max_retries=0)


def make_anthropic_call(
    client: anthropic.Anthropic,
    model: str,
    prompt: str,
    system: str,
    max_tokens: int = ADVISORY_MAX_TOKENS,
    temperature: float = 0.1,
) -> tuple[str, str]:
    """Make a single call to the Anthropic API.

    Returns:
        Tuple of (response_text, stop_reason)
    """
    logger.debug(f"Making API call to {model}")

    try:
        message = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.APIError as exc:
        raise ExternalServiceError(str(exc)) from exc

    parts: list[str] = []
    for block in message.content:
        text = getattr(block, "text", None)
        if text:
            parts.append(text)
    response_text = "".join(parts).strip()

    stop_reason = getattr(message, "stop_reason", "") or ""
    usage = getattr(message, "usage", None)
    output_tokens = getattr(usage, "output_tokens", None) if usage else None
    logger.debug(
        "API call successful (stop_reason=%s, output_tokens=%s, response_length=%s)",
        stop_reason,
        output_tokens,
        len(response_text),
    )

    if stop_reason and stop_reason not in {"end_turn", "stop_sequence"}:
        logger.warning(
            "Anthropic message returned stop_reason='%s' (response chars=%s)",
            stop_reason,
            len(response_text),
        )

    return response_text, stop_reason


def extract_last_json(response: str) -> str:
    """Extract the last JSON object from a response with multiple blocks.

    Models sometimes output multiple JSON blocks when they self-correct; the
    last block is the one to keep.
    """
    json_blocks = re.findall(
        r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", response, re.DOTALL
    )
    if json_blocks:
        return json_blocks[-1]

    # Raw JSON without fences: cut at the matching closing brace
    cleaned = response.strip()
    if cleaned.startswith("{"):
        brace_count = 0
        end_pos = 0
        for i, char in enumerate(cleaned):
            if char == "{":
                brace_count += 1
            elif char == "}":
                brace_count -= 1
                if brace_count == 0:
                    end_pos = i + 1
        if end_pos > 0:
            return cleaned[:end_pos]

    return cleaned


class AnthropicClient:
    """Wrapper class for Anthropic API calls."""

    def __init__(
        self,
        settings: AdvisorySettings | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self.settings = settings or AdvisorySettings()
        self.client = client or init_anthropic_client(self.settings.timeout_seconds)

    def call(self, prompt: str, system: str) -> tuple[str, str]:
        """Make an API call, retrying only if settings allow more than one attempt."""
        caller = retry(
            retry=retry_if_exception_type(ExternalServiceError),
            stop=stop_after_attempt(max(1, self.settings.max_attempts)),
            reraise=True,
        )(make_anthropic_call)
        return caller(
            self.client,
            self.settings.model,
            prompt,
            system,
            self.settings.max_tokens,
            self.settings.temperature,
        )


# Module-level switch for debug content saving
_debug_config: dict[str, Any] = {"save_prompts": False, "prompts_dir": None}


def configure_debug(save_prompts: bool, prompts_dir: Path | None) -> None:
    """Configure debug settings for saving prompts."""
    _debug_config["save_prompts"] = save_prompts
    _debug_config["prompts_dir"] = prompts_dir


def save_debug_content(filename: str, content: str) -> None:
    """Save debug content to file if prompts directory is set."""
    if _debug_config["save_prompts"] and _debug_config["prompts_dir"]:
        debug_path = Path(_debug_config["prompts_dir"]) / filename
        debug_path.write_text(content, encoding="utf-8")
        logger.debug(f"Saved debug content to {debug_path}")


__all__ = [
    "AdvisorySettings",
    "AnthropicClient",
    "ExternalServiceError",
    "configure_debug",
    "extract_last_json",
    "init_anthropic_client",
    "make_anthropic_call",
    "save_debug_content",
]
