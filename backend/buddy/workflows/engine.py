# /buddy/workflows/engine.py

"""
Flow execution engine.

The engine holds no conversation state. Each turn it:
- Picks the flow (the caller's, or one detected from the message)
- Resolves the step, treating unknown or terminal steps as a fresh start
- Ends the flow on a bare cancel reply
- Runs the flow's step handler on a private copy of flow_data
- Validates the resulting transition against WORKFLOWS
- Normalizes every emitted action (dates, defaults) before it leaves

Any failure inside a handler is converted into a well-formed terminal
response, so a turn never fails outright.
"""

import copy
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from buddy.models.flow import DONE, FLOW_STEPS, FlowName, FlowTurnResponse, TaskContext
from buddy.services.ai_service import AIService, ai_service
from buddy.services.extraction_service import ExtractionService, extraction_service
from buddy.services.string_service import StringService, normalize_language, string_service
from buddy.utils.metrics import actions_counter, flow_turns_counter
from buddy.workflows.definitions import WORKFLOWS
from buddy.workflows.detection import detect_flow, is_cancel
from buddy.workflows.flows.add_task import AddTaskFlow
from buddy.workflows.flows.alarm import AlarmFlow
from buddy.workflows.flows.base import FlowHandler, TurnContext, default_quick_actions
from buddy.workflows.flows.check_task import CheckTaskFlow
from buddy.workflows.flows.notes import NotesFlow
from buddy.workflows.flows.plan_day import PlanDayFlow
from buddy.workflows.flows.reminder import ReminderFlow
from buddy.workflows.validator import ensure_action_params, validate_action, validate_transition

logger = logging.getLogger(__name__)

FLOW_HANDLERS = (AddTaskFlow, AlarmFlow, ReminderFlow, CheckTaskFlow, PlanDayFlow, NotesFlow)


class FlowEngine:
    def __init__(
        self,
        extractor: Optional[ExtractionService] = None,
        ai: Optional[AIService] = None,
        strings: Optional[StringService] = None,
    ):
        self.strings = strings or string_service
        ai = ai or ai_service
        if extractor is None:
            extractor = extraction_service if ai is ai_service else ExtractionService(ai)
        self.handlers: Dict[FlowName, FlowHandler] = {}
        for handler_cls in FLOW_HANDLERS:
            self.handlers[handler_cls.flow] = handler_cls(extractor, ai, self.strings)
        missing = set(FlowName) - set(self.handlers)
        if missing:
            raise RuntimeError(f"No handler registered for flows: {sorted(f.value for f in missing)}")

    def resolve_step(self, flow: FlowName, step: Optional[str]) -> Enum:
        steps = FLOW_STEPS[flow]
        initial = steps(WORKFLOWS[flow]["initial_step"])
        if not step or step == DONE:
            return initial
        try:
            return steps(step)
        except ValueError:
            logger.warning(f"Unknown step '{step}' for flow '{flow.value}', restarting the flow.")
            return initial

    def terminal(self, key: str, language: str, flow: Optional[FlowName] = None) -> FlowTurnResponse:
        return FlowTurnResponse(
            message=self.strings.render(key, language),
            next_step=DONE,
            flow=flow.value if flow else None,
            quick_actions=default_quick_actions(self.strings, language),
        )

    async def step(
        self,
        flow: Optional[FlowName],
        step: Optional[str],
        user_input: str,
        task_context: TaskContext,
        now: datetime,
        language: Optional[str] = None,
        flow_data: Optional[Dict[str, Any]] = None,
    ) -> FlowTurnResponse:
        """Runs one turn of a guided flow."""
        language = normalize_language(language)
        user_input = user_input or ""

        if flow is None:
            flow = detect_flow(user_input)
            if flow is None:
                flow_turns_counter.labels(flow="none", next_step=DONE).inc()
                key = "let_me_help" if user_input.strip() else "greeting"
                return self.terminal(key, language)
            step = None

        current = self.resolve_step(flow, step)
        initial = WORKFLOWS[flow]["initial_step"]
        if current.value != initial and is_cancel(user_input):
            flow_turns_counter.labels(flow=flow.value, next_step="cancelled").inc()
            return self.terminal("cancelled", language, flow)

        ctx = TurnContext(
            flow=flow,
            step=current,
            user_input=user_input,
            flow_data=copy.deepcopy(flow_data or {}),
            task_context=task_context,
            language=language,
            now=now,
        )

        try:
            response = await self.handlers[flow].handle(ctx)
        except Exception as e:
            logger.error(f"Flow '{flow.value}' failed at step '{current.value}': {e}", exc_info=True)
            flow_turns_counter.labels(flow=flow.value, next_step="error").inc()
            return self.terminal("generic_error", language, flow)

        transition = validate_transition(flow, current.value, response.next_step)
        if not transition["is_valid"]:
            logger.error(f"Rejected flow transition: {transition['message']}")
            flow_turns_counter.labels(flow=flow.value, next_step="error").inc()
            return self.terminal("generic_error", language, flow)

        actions = []
        for action in response.actions:
            action = ensure_action_params(action, ctx.today)
            check = validate_action(action)
            if not check["is_valid"]:
                logger.error(f"Dropping malformed action from flow '{flow.value}': {check['message']}")
                continue
            actions_counter.labels(type=action.type.value, source="flow").inc()
            actions.append(action)
        if response.actions and not actions and response.next_step == DONE:
            # The confirmation message would describe an action that never happens.
            logger.error(f"Flow '{flow.value}' finished but every action it emitted was dropped")
            flow_turns_counter.labels(flow=flow.value, next_step="error").inc()
            return self.terminal("generic_error", language, flow)
        response.actions = actions

        flow_turns_counter.labels(flow=flow.value, next_step=response.next_step).inc()
        return response


# Globally accessible instance
flow_engine = FlowEngine()
