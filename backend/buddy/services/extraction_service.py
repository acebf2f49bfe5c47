# /buddy/services/extraction_service.py

import json
import logging
import re
from typing import Any, Optional

from buddy.config.persona import EXTRACTION_SYSTEM_PROMPT, EXTRACTION_USER_PROMPT
from buddy.models.intent import ExtractionSchema, FieldSpec, ParsedIntent
from buddy.services.ai_service import FAST, AIService, ai_service
from buddy.services.date_service import parse_hhmm
from buddy.utils.errors import OracleFault
from buddy.utils.metrics import extraction_counter

# The intent extractor turns free text into a ParsedIntent using the fast model
# pool. Oracle output is untrusted: it is decoded against the schema field by
# field, and any failure yields an all-None intent instead of an exception.

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_NULLISH = {"", "null", "none", "n/a", "na", "unknown", "nil"}


def describe_schema(schema: ExtractionSchema) -> str:
    lines = []
    for name, spec in schema.items():
        detail = spec.description or spec.type
        if spec.type == "enum" and spec.choices:
            detail = f"{detail} (one of: {', '.join(spec.choices)})"
        elif spec.type == "time":
            detail = f"{detail} (\"HH:MM\" 24-hour)"
        elif spec.type == "boolean":
            detail = f"{detail} (true/false)"
        lines.append(f'- "{name}": {detail} or null')
    return "\n".join(lines)


def strip_code_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = _FENCE_RE.sub("", text).strip()
    return text


def _json_object(raw: Optional[str]) -> Optional[dict]:
    if not raw:
        return None
    text = strip_code_fences(raw)
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def coerce_field(spec: FieldSpec, value: Any) -> Optional[Any]:
    """Validates one decoded value against its field spec; invalid means None."""
    if value is None or isinstance(value, (dict, list)):
        return None

    if spec.type == "boolean":
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return None

    text = str(value).strip().strip('"').strip()
    if text.lower() in _NULLISH:
        return None

    if spec.type == "time":
        clock = parse_hhmm(text)
        return clock.hhmm() if clock else None
    if spec.type == "enum":
        lowered = text.lower()
        return lowered if lowered in spec.choices else None
    return text


def decode_intent(schema: ExtractionSchema, raw: Optional[str]) -> ParsedIntent:
    """Strict schema-validated decode of raw oracle text."""
    payload = _json_object(raw)
    if payload is None:
        return ParsedIntent.empty(schema, fault="unparseable")
    fields = {name: coerce_field(spec, payload.get(name)) for name, spec in schema.items()}
    return ParsedIntent(fields=fields)


class ExtractionService:
    def __init__(self, ai: Optional[AIService] = None):
        self.ai = ai or ai_service

    async def extract(self, schema: ExtractionSchema, context_text: str, free_text: str) -> ParsedIntent:
        """
        Extracts `schema` fields from `free_text`. Never raises: oracle faults
        and undecodable output both come back as an all-None intent with
        `fault` set.
        """
        if not free_text or not free_text.strip():
            return ParsedIntent.empty(schema)

        system = EXTRACTION_SYSTEM_PROMPT.format(field_lines=describe_schema(schema))
        user = EXTRACTION_USER_PROMPT.format(context=context_text or "(none)", text=free_text.strip())
        try:
            message = await self.ai.complete(
                [{"role": "system", "content": system}, {"role": "user", "content": user}],
                FAST,
                temperature=0.0,
                max_tokens=200,
                json_mode=True,
            )
        except OracleFault as e:
            extraction_counter.labels(status="fault").inc()
            logger.warning(f"Intent extraction failed, continuing without it: {e}")
            return ParsedIntent.empty(schema, fault=type(e).__name__)
        except Exception as e:
            extraction_counter.labels(status="error").inc()
            logger.error(f"Unexpected error during intent extraction: {e}", exc_info=True)
            return ParsedIntent.empty(schema, fault="unexpected")

        intent = decode_intent(schema, getattr(message, "content", None))
        extraction_counter.labels(status="unparseable" if intent.fault else "success").inc()
        if intent.fault:
            logger.warning("Oracle returned unparseable extraction output.")
        return intent


# Globally accessible instance
extraction_service = ExtractionService()
