# /buddy/services/ai_service.py

import logging
from typing import Any, Dict, List, Optional, Sequence

import openai
import tenacity
from openai import AsyncOpenAI

from buddy.config.settings import settings
from buddy.utils.errors import (
    RETRYABLE_FAULTS,
    ExtractionFault,
    ModelDecommissionedFault,
    OracleFault,
    RateLimitFault,
)
from buddy.utils.metrics import ai_fallback_counter, ai_requests_counter


# This service encapsulates all calls to the language-model oracle (Groq, via
# its OpenAI-compatible API). It owns model selection: two pools of models,
# round-robin inside a pool, and a single fallback attempt against the
# opposite pool when a model is rate limited or has been decommissioned.

logger = logging.getLogger(__name__)

FAST = "fast"
SMART = "smart"

_DECOMMISSIONED_CODES = {"model_decommissioned", "model_not_found"}


class ModelRotation:
    """
    Round-robin model selection per pool.

    The counters are shared by every request in the process and are not
    locked: a race only makes the load distribution slightly uneven.
    """

    def __init__(self, pools: Dict[str, Sequence[str]], fallbacks: Dict[str, str]):
        self.pools = {name: list(models) for name, models in pools.items()}
        self.fallbacks = dict(fallbacks)
        self._counters = {name: 0 for name in self.pools}

    @classmethod
    def from_settings(cls, cfg=settings) -> "ModelRotation":
        return cls(
            pools={FAST: cfg.fast_models, SMART: cfg.smart_models},
            # A fast call falls back into the smart pool and vice versa.
            fallbacks={FAST: cfg.fast_fallback_model, SMART: cfg.smart_fallback_model},
        )

    def next_model(self, pool: str) -> str:
        models = self.pools[pool]
        index = self._counters[pool] % len(models)
        self._counters[pool] = index + 1
        return models[index]

    def fallback_for(self, pool: str) -> str:
        return self.fallbacks[pool]


def classify_oracle_error(exc: Exception, model: str) -> OracleFault:
    """Maps an SDK exception onto the fault taxonomy."""
    if isinstance(exc, openai.RateLimitError):
        return RateLimitFault(f"Rate limited on {model}", model)
    if isinstance(exc, openai.APIStatusError):
        code = getattr(exc, "code", None)
        text = str(exc).lower()
        if code in _DECOMMISSIONED_CODES or "decommissioned" in text or (
            exc.status_code == 404 and "model" in text
        ):
            return ModelDecommissionedFault(f"Model {model} is no longer available", model)
    return ExtractionFault(f"{type(exc).__name__}: {exc}", model)


class AIService:
    def __init__(self, client: Optional[AsyncOpenAI] = None, rotation: Optional[ModelRotation] = None):
        if client is None and settings.groq_api_key:
            client = AsyncOpenAI(
                api_key=settings.groq_api_key,
                base_url=settings.groq_base_url,
                timeout=settings.oracle_timeout_seconds,
                # Retries are handled here so that the fallback model is used instead.
                max_retries=0,
            )
        self.client = client
        self.rotation = rotation or ModelRotation.from_settings()
        if self.client is None:
            logger.warning("No GROQ_API_KEY configured; oracle calls will degrade to fallbacks.")

    @property
    def available(self) -> bool:
        return self.client is not None

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        pool: str = FAST,
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.2,
        max_tokens: int = 300,
        json_mode: bool = False,
    ):
        """
        Runs one chat completion and returns the first choice's message.

        Rate-limit and decommissioned-model faults get exactly one retry
        against the pool's fallback model. Anything else, or a second failure,
        surfaces as ExtractionFault.
        """
        if not self.client:
            raise ExtractionFault("No oracle API key configured")

        primary = self.rotation.next_model(pool)
        fallback = self.rotation.fallback_for(pool)
        faults: List[OracleFault] = []

        try:
            async for attempt in tenacity.AsyncRetrying(
                stop=tenacity.stop_after_attempt(2),
                retry=tenacity.retry_if_exception_type(RETRYABLE_FAULTS),
                reraise=True,
            ):
                with attempt:
                    model = primary
                    if faults:
                        model = fallback
                        reason = type(faults[-1]).__name__
                        ai_fallback_counter.labels(reason=reason).inc()
                        logger.warning(f"{reason} on {primary}; retrying once with fallback model {fallback}")
                    try:
                        return await self._call(model, messages, tools, temperature, max_tokens, json_mode)
                    except OracleFault as fault:
                        faults.append(fault)
                        raise
        except RETRYABLE_FAULTS as e:
            raise ExtractionFault(f"Fallback attempt failed: {e}", e.model) from e

    async def _call(self, model, messages, tools, temperature, max_tokens, json_mode):
        kwargs: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            ai_requests_counter.labels(model=model, status="error").inc()
            fault = classify_oracle_error(e, model)
            logger.error(f"Oracle call to {model} failed: {fault}")
            raise fault from e

        if not response.choices:
            ai_requests_counter.labels(model=model, status="empty").inc()
            raise ExtractionFault(f"Oracle returned no choices from {model}", model)

        ai_requests_counter.labels(model=model, status="success").inc()
        return response.choices[0].message

    async def generate_text(
        self,
        system: str,
        user: str,
        pool: str = SMART,
        *,
        temperature: float = 0.7,
        max_tokens: int = 300,
    ) -> str:
        """Plain text generation; raises ExtractionFault on failure or empty output."""
        message = await self.complete(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            pool,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        text = (message.content or "").strip()
        if not text:
            raise ExtractionFault("Oracle returned an empty message")
        return text


# Globally accessible instance
ai_service = AIService()
