# /buddy/workflows/flows/reminder.py

import re
from typing import Optional

from buddy.models.flow import Action, ActionType, FlowName, FlowTurnResponse, ReminderStep
from buddy.models.intent import FieldSpec, ParsedIntent
from buddy.services.date_service import strip_temporal
from buddy.workflows.flows.base import FlowHandler, TurnContext, clean_words

_COMMAND_RE = re.compile(
    r"\bremind\s+me(?:\s+(?:to|about|that))?\b"
    r"|\b(?:set|create|add|new)\s+(?:a\s+)?reminders?\b"
    r"|\breminders?\s+(?:set|laga|lagao|lagado|rakho|daalo|dalo)(?:\s+(?:karo|do|de))?\b"
    r"|\byaad\s+(?:dila|dilana|dilaana|dila\s+dena|karana|karwana)\b"
    r"|\b(?:remind|reminders?)\b",
    re.I,
)


class ReminderFlow(FlowHandler):
    flow = FlowName.REMINDER
    steps = ReminderStep
    schema = {
        "message": FieldSpec(description="what to remind the user about, without time or date words"),
        "time": FieldSpec(type="time", description="when to remind"),
    }

    def step_handlers(self):
        return {
            ReminderStep.START: self.on_start,
            ReminderStep.ASK_WHAT: self.on_ask_what,
            ReminderStep.ASK_WHEN: self.on_ask_when,
        }

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        message = self.message_from(ctx, intent)
        if message:
            ctx.flow_data["message"] = message
        self.collect_time(ctx, intent, allow_bare=False)
        return self.advance(ctx)

    async def on_ask_what(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        message = self.message_from(ctx, intent) or strip_temporal(ctx.text)
        if message:
            ctx.flow_data["message"] = message
        self.collect_time(ctx, intent, allow_bare=False)
        return self.advance(ctx)

    async def on_ask_when(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        self.collect_time(ctx, intent, allow_bare=True)
        return self.advance(ctx)

    def message_from(self, ctx: TurnContext, intent: ParsedIntent) -> Optional[str]:
        for candidate in (intent.get("message"), ctx.text):
            cleaned = clean_words(candidate or "", _COMMAND_RE)
            if cleaned:
                return cleaned
        return None

    def collect_time(self, ctx: TurnContext, intent: ParsedIntent, allow_bare: bool) -> None:
        start, _ = self.upcoming_times(ctx, allow_bare=allow_bare)
        if start is None:
            start = intent.get("time")
        if start:
            ctx.flow_data["time"] = start

    def advance(self, ctx: TurnContext) -> FlowTurnResponse:
        step = self.next_slot_step(ctx.flow_data)
        if step is ReminderStep.ASK_WHAT:
            return self.ask(ctx, step, "reminder_ask_what")
        if step is ReminderStep.ASK_WHEN:
            return self.ask(ctx, step, "reminder_ask_when", message=ctx.flow_data["message"])

        data = ctx.flow_data
        params = {"time": data["time"], "message": data["message"], "date": data["date"]}
        text = self.say(
            ctx, "reminder_done", day=self.day_label(ctx, data["date"]), time=data["time"], message=data["message"]
        )
        return self.finish(ctx, text, [Action(type=ActionType.SET_REMINDER, params=params)])
