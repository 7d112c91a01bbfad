"""Validation of LLM extraction replies.

The extraction layer turns a natural-language project description into
structured quote parameters. It never computes prices. This module parses
its reply and validates it against the quote input model so that anything
reaching the engine is structurally sound.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import Field, ValidationError

from cpq.exceptions import InvalidQuoteInputError
from cpq.models.quote import QuoteInput

logger = logging.getLogger(__name__)


class ExtractionResult(QuoteInput):
    """Quote parameters extracted from free text, with extraction metadata."""

    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    ambiguities: list[str] = Field(default_factory=list)
    raw_input: str = Field(default="", alias="rawInput")

    def to_quote_input(self) -> QuoteInput:
        """Drop the extraction metadata, leaving a plain QuoteInput."""
        data = self.model_dump(include=set(QuoteInput.model_fields))
        return QuoteInput.model_validate(data)


def extract_json_block(text: str) -> str | None:
    """Extract a JSON object from a model reply.

    Accepts ```json ... ``` fences, plain ``` fences, or a bare object
    (outermost ``{`` to the last ``}``).
    """
    start = text.find("```json")
    if start != -1:
        start += 7
    else:
        start = text.find("```")
        if start != -1:
            start += 3

    if start != -1:
        end = text.find("```", start)
        if end == -1:
            return None
        return text[start:end].strip()

    # No fences: fall back to a bare object
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last < first:
        return None
    return text[first : last + 1]


def parse_extraction_response(text: str, raw_input: str = "") -> ExtractionResult:
    """Parse and validate an extraction reply.

    Args:
        text: The raw reply from the extraction model.
        raw_input: The user's original description, kept for traceability.

    Raises:
        InvalidQuoteInputError: If the reply holds no JSON object, the JSON
            is malformed, or it violates the quote input structure (unknown
            building type, negative square footage, unknown discipline,
            LOD or scope, and so on).
    """
    json_str = extract_json_block(text)
    if json_str is None:
        logger.warning("No JSON block found in extraction response")
        msg = "Extraction response contains no JSON object"
        raise InvalidQuoteInputError(msg)

    try:
        data: Any = json.loads(json_str)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in extraction response")
        msg = f"Extraction response is not valid JSON: {exc.msg}"
        raise InvalidQuoteInputError(msg) from exc

    if not isinstance(data, dict):
        msg = "Extraction response JSON must be an object"
        raise InvalidQuoteInputError(msg)

    data["raw_input"] = raw_input
    data.pop("rawInput", None)

    try:
        result = ExtractionResult.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid extraction: {exc.error_count()} validation error(s)"
        raise InvalidQuoteInputError(msg) from exc

    if result.ambiguities:
        logger.info(
            "Extraction parsed with %d ambiguities (confidence %.2f)",
            len(result.ambiguities),
            result.confidence,
        )
    return result
