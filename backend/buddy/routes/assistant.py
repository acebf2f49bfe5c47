# /buddy/routes/assistant.py

import logging

from fastapi import APIRouter, Depends, Request

from buddy.models.api import (
    AdvancedChatRequest,
    AdvancedChatResponse,
    MessageResponse,
    ProactiveCheckinRequest,
    RandomMotivationRequest,
    TaskMessageRequest,
)
from buddy.models.flow import FlowTurnRequest, FlowTurnResponse
from buddy.services.checkin_service import CheckinService, checkin_service
from buddy.services.tool_router import ToolRouter, tool_router
from buddy.utils.dependencies import caller_clock
from buddy.utils.rate_limiter import ORACLE_LIMIT, limiter
from buddy.workflows.engine import FlowEngine, flow_engine

# This file defines the assistant endpoints used by the browser client: the
# guided flow turn, the autonomous tool-calling chat, the template-rendered
# check-in messages and the oracle-written random motivation. Request
# contracts are enforced by the Pydantic models (violations are 422);
# everything past validation answers 200.

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assistant"])


def get_flow_engine() -> FlowEngine:
    return flow_engine


def get_tool_router() -> ToolRouter:
    return tool_router


def get_checkin_service() -> CheckinService:
    return checkin_service


@router.post("/flow", response_model=FlowTurnResponse)
@limiter.limit(ORACLE_LIMIT)
async def flow_turn(request: Request, body: FlowTurnRequest, engine: FlowEngine = Depends(get_flow_engine)):
    """Runs one turn of a guided flow; the caller round-trips flow, step and flowData."""
    now = caller_clock(body.current_date, body.current_time)
    try:
        return await engine.step(
            flow=body.flow,
            step=body.step,
            user_input=body.user_input,
            task_context=body.task_context,
            now=now,
            language=body.language,
            flow_data=body.flow_data,
        )
    except Exception as e:
        logger.error(f"Flow turn failed: {e}", exc_info=True)
        return engine.terminal("generic_error", body.language, body.flow)


@router.post("/advanced-chat", response_model=AdvancedChatResponse)
@limiter.limit(ORACLE_LIMIT)
async def advanced_chat(
    request: Request, body: AdvancedChatRequest, chat_router: ToolRouter = Depends(get_tool_router)
):
    """Free chat: the oracle may answer in text and/or call tools."""
    now = caller_clock(body.current_date, body.current_time)
    try:
        return await chat_router.route(
            body.messages, body.task_context, now, language=body.language, mode=body.voice_mode
        )
    except Exception as e:
        logger.error(f"Advanced chat failed: {e}", exc_info=True)
        message = chat_router.strings.render("generic_error", body.language)
        return AdvancedChatResponse(type="message", message=message)


@router.post("/task-reminder", response_model=MessageResponse, response_model_exclude_defaults=True)
async def task_reminder(body: TaskMessageRequest, checkins: CheckinService = Depends(get_checkin_service)):
    return checkins.task_reminder(body.task, body.language)


@router.post("/task-checkin", response_model=MessageResponse, response_model_exclude_defaults=True)
async def task_checkin(body: TaskMessageRequest, checkins: CheckinService = Depends(get_checkin_service)):
    return checkins.task_checkin(body.task, body.language)


@router.post("/proactive-checkin", response_model=MessageResponse)
async def proactive_checkin(body: ProactiveCheckinRequest, checkins: CheckinService = Depends(get_checkin_service)):
    return checkins.proactive_checkin(body.type, body.task_context, body.language)


@router.post("/random-motivation", response_model=MessageResponse, response_model_exclude_defaults=True)
@limiter.limit(ORACLE_LIMIT)
async def random_motivation(
    request: Request, body: RandomMotivationRequest, checkins: CheckinService = Depends(get_checkin_service)
):
    return await checkins.random_motivation(body.task_context, body.language)
