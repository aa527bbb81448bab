"""Writing assistant backed by the Gemini CLI."""

import json
import logging
import re
import subprocess
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from lumina.core.collaborators import CollaboratorError
from lumina.models.assist import CoverStyleSuggestion, LayoutSuggestion, Outline

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GeminiError(CollaboratorError):
    """Error from Gemini CLI."""


OUTLINE_PROMPT = """Suggest a book plot and chapter structure based on the following idea.
Answer in the same language as the idea.

Return ONLY a JSON object with this shape:
{{"title": "...", "plot_summary": "...", "chapters": [{{"title": "...", "objective": "..."}}]}}

Idea: {idea}"""

REFINE_PROMPT = """Refine the following text based on this instruction: "{instruction}".
Return ONLY the refined text.

Text: {content}"""

MUSE_PROMPT = """You are a professional editor. Analyze this text for a "{genre}" book and provide a
short, inspiring suggestion (max 20 words) to improve the narrative, tone, or rhythm.

Text: {content}"""

LAYOUT_PROMPT = """Suggest professional book layout parameters for a "{genre}" book.
Description: {description}
Consider typography, margins, and readability.

Return ONLY a JSON object with these keys:
- paper_size: standard paper size name (e.g. "A5", "US Trade")
- font_scale: multiplier for the base font size, between 0.8 and 1.5
- margins: percentage margin (e.g. "12%")
- columns: number of text columns, 1 or 2
- line_height: line height multiplier (e.g. 1.6)
- style_name: a catchy name for this layout style
- font_family: "serif" or "sans"
"""

COVER_PROMPT = """Suggest cover style parameters for a book titled "{title}" in the genre "{genre}".
Description: {description}

Return ONLY a JSON object with these keys:
- typography: one of "serif", "sans", "script"
- filter: one of "none", "sepia", "vintage", "noir", "warm", "cold", "high-contrast", "dreamy"
- overlay_opacity: number between 0 and 0.8
- visual_prompt: a detailed visual description for image generation"""

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class GeminiAssistant:
    """Outline generator, text refiner, layout and muse advisor in one client."""

    DEFAULT_MODEL = "gemini-3-flash-preview"
    REFINE_MODEL = "gemini-3-pro-preview"
    TIMEOUT_SECONDS = 300  # 5 minutes
    MUSE_MIN_CHARS = 50

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        refine_model: str = REFINE_MODEL,
        timeout: int = TIMEOUT_SECONDS,
    ):
        self.model = model
        self.refine_model = refine_model
        self.timeout = timeout

    def _call_gemini(self, prompt: str, model: str | None = None) -> str:
        """Call Gemini CLI and return response text."""
        cmd = ["gemini", "-m", model or self.model, prompt]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GeminiError("TIMEOUT", f"Request timed out after {self.timeout}s")
        except FileNotFoundError:
            raise GeminiError("CLI_MISSING", "gemini CLI not found on PATH")

        if result.returncode != 0:
            error_msg = result.stderr or result.stdout or "Unknown error"
            raise GeminiError("CLI_ERROR", error_msg.strip(), code=result.returncode)

        return result.stdout

    def _parse_json(self, response_text: str, model: type[ModelT]) -> ModelT:
        """Pull the JSON object out of a response and validate it."""
        match = _FENCE.search(response_text)
        text = match.group(1) if match else response_text
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end < start:
            raise GeminiError("BAD_RESPONSE", "No JSON object in response")

        try:
            data = json.loads(text[start : end + 1])
            return model.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            log.debug("Unusable response: %s", response_text)
            raise GeminiError("BAD_RESPONSE", str(e))

    def generate_outline(self, prompt: str) -> Outline:
        response = self._call_gemini(OUTLINE_PROMPT.format(idea=prompt))
        return self._parse_json(response, Outline)

    def refine(self, content: str, instruction: str) -> str:
        response = self._call_gemini(
            REFINE_PROMPT.format(instruction=instruction, content=content),
            model=self.refine_model,
        )
        refined = response.strip()
        if not refined:
            raise GeminiError("EMPTY_RESPONSE", "Refiner returned no text")
        return refined

    def muse(self, content: str, genre: str) -> str:
        if len(content) <= self.MUSE_MIN_CHARS:
            return ""
        return self._call_gemini(MUSE_PROMPT.format(genre=genre, content=content)).strip()

    def suggest_layout(self, genre: str, description: str) -> LayoutSuggestion:
        response = self._call_gemini(LAYOUT_PROMPT.format(genre=genre, description=description))
        return self._parse_json(response, LayoutSuggestion)

    def suggest_cover_style(
        self, title: str, genre: str, description: str
    ) -> CoverStyleSuggestion:
        response = self._call_gemini(
            COVER_PROMPT.format(title=title, genre=genre, description=description)
        )
        return self._parse_json(response, CoverStyleSuggestion)
