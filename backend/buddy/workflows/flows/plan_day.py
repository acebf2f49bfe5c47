# /buddy/workflows/flows/plan_day.py

import logging
from typing import List

from buddy.config.persona import LANGUAGE_GUIDE, PLAN_DAY_SYSTEM_PROMPT, PLAN_DAY_USER_PROMPT
from buddy.models.flow import FlowName, FlowTurnResponse, PlanDayStep, QuickAction, TaskSummary
from buddy.services.ai_service import SMART
from buddy.utils.errors import OracleFault
from buddy.workflows.flows.base import FlowHandler, TurnContext
from buddy.workflows.flows.check_task import format_task_list

logger = logging.getLogger(__name__)

# Untimed tasks sort as if they started at the middle of their part of day.
_PART_ANCHORS = {"morning": "09:00", "afternoon": "14:00", "evening": "19:00"}


def order_tasks(tasks: List[TaskSummary]) -> List[TaskSummary]:
    """Orders by start time, placing untimed tasks by their part of day."""
    return sorted(tasks, key=lambda t: t.start_time or _PART_ANCHORS.get(t.time_of_day or "", "23:59"))


class PlanDayFlow(FlowHandler):
    flow = FlowName.PLAN_DAY
    steps = PlanDayStep

    def step_handlers(self):
        return {PlanDayStep.START: self.on_start}

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        summary = ctx.task_context
        if summary.total == 0:
            response = self.finish(ctx, self.say(ctx, "plan_no_tasks"))
            response.quick_actions = [
                QuickAction(label=self.strings.render("qa_add_task", ctx.language), action="add_task")
            ]
            return response
        if summary.pending == 0:
            return self.finish(ctx, self.say(ctx, "plan_all_done", total=summary.total))

        ordered = order_tasks(summary.pending_tasks)
        return self.finish(ctx, await self.build_plan(ctx, ordered))

    async def build_plan(self, ctx: TurnContext, ordered: List[TaskSummary]) -> str:
        task_list = format_task_list(ordered)
        guide = LANGUAGE_GUIDE[ctx.language]
        try:
            return await self.ai.generate_text(
                PLAN_DAY_SYSTEM_PROMPT.format(language_rule=guide["rule"], language_tone=guide["tone"]),
                PLAN_DAY_USER_PROMPT.format(current_time=ctx.now.strftime("%H:%M"), task_list=task_list),
                SMART,
                temperature=0.6,
                max_tokens=350,
            )
        except OracleFault as e:
            logger.warning(f"Day plan generation failed, using the ordered task list: {e}")
            return self.say(ctx, "plan_fallback", pending=ctx.task_context.pending, task_list=task_list)
