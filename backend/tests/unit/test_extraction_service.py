# backend/tests/unit/test_extraction_service.py
import pytest

from conftest import chat_reply
from buddy.models.intent import FieldSpec
from buddy.services.extraction_service import ExtractionService, coerce_field, decode_intent, strip_code_fences
from buddy.utils.errors import RateLimitFault

SCHEMA = {
    "title": FieldSpec(description="task title"),
    "startTime": FieldSpec(type="time"),
    "mood": FieldSpec(type="enum", choices=["happy", "sad"]),
    "urgent": FieldSpec(type="boolean"),
}


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


def test_decode_intent_validates_each_field():
    raw = '```json\n{"title": "Gym", "startTime": "18:30", "mood": "HAPPY", "urgent": "true", "extra": 1}\n```'
    intent = decode_intent(SCHEMA, raw)

    assert intent.fault is None
    assert intent.fields == {"title": "Gym", "startTime": "18:30", "mood": "happy", "urgent": True}


def test_decode_intent_drops_invalid_values():
    intent = decode_intent(SCHEMA, '{"title": "null", "startTime": "25:99", "mood": "angry", "urgent": "maybe"}')
    assert intent.is_empty
    assert intent.fault is None


def test_decode_intent_tolerates_surrounding_prose():
    intent = decode_intent(SCHEMA, 'Sure! Here you go: {"title": "Call mom"} hope that helps')
    assert intent.get("title") == "Call mom"


@pytest.mark.parametrize("raw", [None, "", "not json at all", "[1, 2, 3]", "{broken"])
def test_decode_intent_unparseable(raw):
    intent = decode_intent(SCHEMA, raw)
    assert intent.is_empty
    assert intent.fault == "unparseable"
    assert set(intent.fields) == set(SCHEMA)


def test_coerce_field_rejects_structures():
    assert coerce_field(FieldSpec(), {"nested": True}) is None
    assert coerce_field(FieldSpec(), ["a"]) is None
    assert coerce_field(FieldSpec(type="time"), "9:05") == "09:05"


@pytest.mark.asyncio
async def test_extract_calls_fast_pool_in_json_mode(fake_ai):
    fake_ai.complete.return_value = chat_reply(content='{"title": "Gym", "startTime": "06:00"}')
    service = ExtractionService(fake_ai)

    intent = await service.extract(SCHEMA, "flow=add_task", "gym at 6 am")

    assert intent.get("title") == "Gym"
    assert intent.get("startTime") == "06:00"
    kwargs = fake_ai.complete.await_args.kwargs
    assert kwargs["json_mode"] is True
    assert kwargs["temperature"] == 0.0


@pytest.mark.asyncio
async def test_extract_skips_oracle_for_empty_text(fake_ai):
    intent = await ExtractionService(fake_ai).extract(SCHEMA, "", "   ")
    assert intent.is_empty
    assert intent.fault is None
    fake_ai.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_extract_never_raises_on_oracle_fault(fake_ai):
    fake_ai.complete.side_effect = RateLimitFault("slow down")
    intent = await ExtractionService(fake_ai).extract(SCHEMA, "", "gym")
    assert intent.is_empty
    assert intent.fault == "RateLimitFault"


@pytest.mark.asyncio
async def test_extract_never_raises_on_unexpected_error(fake_ai):
    fake_ai.complete.side_effect = ValueError("boom")
    intent = await ExtractionService(fake_ai).extract(SCHEMA, "", "gym")
    assert intent.is_empty
    assert intent.fault == "unexpected"
