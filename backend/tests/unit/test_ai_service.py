# backend/tests/unit/test_ai_service.py
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from buddy.services.ai_service import FAST, SMART, AIService, ModelRotation, classify_oracle_error
from buddy.utils.errors import ExtractionFault, ModelDecommissionedFault, RateLimitFault

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


def _response(status_code):
    return httpx.Response(status_code, request=httpx.Request("POST", GROQ_URL))


def rate_limited():
    return openai.RateLimitError("Rate limit reached", response=_response(429), body=None)


def decommissioned():
    return openai.BadRequestError(
        "The model has been decommissioned",
        response=_response(400),
        body={"code": "model_decommissioned", "message": "The model has been decommissioned"},
    )


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content, tool_calls=None))])


def fake_client(*outcomes):
    create = AsyncMock(side_effect=list(outcomes))
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create))), create


@pytest.fixture
def rotation():
    return ModelRotation(
        pools={FAST: ["fast-a", "fast-b"], SMART: ["smart-a"]},
        fallbacks={FAST: "smart-a", SMART: "fast-a"},
    )


def test_rotation_round_robins_within_a_pool(rotation):
    assert [rotation.next_model(FAST) for _ in range(3)] == ["fast-a", "fast-b", "fast-a"]
    assert rotation.next_model(SMART) == "smart-a"
    assert rotation.fallback_for(FAST) == "smart-a"


def test_classify_oracle_errors():
    assert isinstance(classify_oracle_error(rate_limited(), "m"), RateLimitFault)
    assert isinstance(classify_oracle_error(decommissioned(), "m"), ModelDecommissionedFault)
    other = openai.InternalServerError("boom", response=_response(500), body=None)
    assert isinstance(classify_oracle_error(other, "m"), ExtractionFault)


@pytest.mark.asyncio
async def test_complete_returns_first_choice(rotation):
    client, create = fake_client(completion("hello"))
    service = AIService(client=client, rotation=rotation)

    message = await service.complete([{"role": "user", "content": "hi"}], FAST, json_mode=True)

    assert message.content == "hello"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "fast-a"
    assert kwargs["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_rate_limit_gets_exactly_one_fallback_attempt(rotation):
    client, create = fake_client(rate_limited(), completion("from fallback"))
    service = AIService(client=client, rotation=rotation)

    message = await service.complete([{"role": "user", "content": "hi"}], FAST)

    assert message.content == "from fallback"
    assert create.await_count == 2
    assert [call.kwargs["model"] for call in create.await_args_list] == ["fast-a", "smart-a"]


@pytest.mark.asyncio
async def test_decommissioned_model_falls_back_to_other_pool(rotation):
    client, create = fake_client(decommissioned(), completion("ok"))
    service = AIService(client=client, rotation=rotation)

    await service.complete([{"role": "user", "content": "hi"}], SMART)

    assert [call.kwargs["model"] for call in create.await_args_list] == ["smart-a", "fast-a"]


@pytest.mark.asyncio
async def test_second_failure_surfaces_as_extraction_fault(rotation):
    client, create = fake_client(rate_limited(), rate_limited())
    service = AIService(client=client, rotation=rotation)

    with pytest.raises(ExtractionFault):
        await service.complete([{"role": "user", "content": "hi"}], FAST)
    assert create.await_count == 2


@pytest.mark.asyncio
async def test_other_errors_are_not_retried(rotation):
    client, create = fake_client(openai.APIConnectionError(request=httpx.Request("POST", GROQ_URL)))
    service = AIService(client=client, rotation=rotation)

    with pytest.raises(ExtractionFault):
        await service.complete([{"role": "user", "content": "hi"}], FAST)
    assert create.await_count == 1


@pytest.mark.asyncio
async def test_generate_text_rejects_empty_output(rotation):
    client, _ = fake_client(completion("   "))
    service = AIService(client=client, rotation=rotation)

    with pytest.raises(ExtractionFault):
        await service.generate_text("system", "user")


@pytest.mark.asyncio
async def test_unconfigured_service_raises_fault(mocker, rotation):
    mocker.patch("buddy.services.ai_service.settings.groq_api_key", None)
    service = AIService(rotation=rotation)

    assert service.available is False
    with pytest.raises(ExtractionFault):
        await service.complete([{"role": "user", "content": "hi"}])
