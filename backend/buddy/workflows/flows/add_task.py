# /buddy/workflows/flows/add_task.py

import re
from typing import Optional

from buddy.models.flow import Action, ActionType, AddTaskStep, FlowName, FlowTurnResponse
from buddy.models.intent import FieldSpec, ParsedIntent
from buddy.services.date_service import ClockTime, part_of_day, strip_temporal, time_of_day_bucket
from buddy.workflows.flows.base import FlowHandler, TurnContext, clean_words

_COMMAND_RE = re.compile(
    r"\b(?:add|create|new|naya|nayi)\s+(?:a\s+)?tasks?\b"
    r"|\btasks?\s+(?:add|create|banao|bana\s+do|likho|daalo|dalo)\b"
    r"|\b(?:add|banao|bana\s+do|daalo|dalo|todo|to-do)\b"
    r"|\btasks?\b",
    re.I,
)


class AddTaskFlow(FlowHandler):
    flow = FlowName.ADD_TASK
    steps = AddTaskStep
    schema = {
        "title": FieldSpec(description="short task title without command, time or date words"),
        "startTime": FieldSpec(type="time", description="when the task starts"),
        "endTime": FieldSpec(type="time", description="when the task ends, only if a range was given"),
    }

    def step_handlers(self):
        return {
            AddTaskStep.START: self.on_start,
            AddTaskStep.ASK_TITLE: self.on_ask_title,
            AddTaskStep.ASK_TIME: self.on_ask_time,
        }

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        title = self.title_from(ctx, intent)
        if title:
            ctx.flow_data["title"] = title
        self.collect_schedule(ctx, intent, allow_bare=False)
        return self.advance(ctx)

    async def on_ask_title(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        # Whatever the user answers here is the title, minus any time words.
        title = self.title_from(ctx, intent) or strip_temporal(ctx.text)
        if title:
            ctx.flow_data["title"] = title
        self.collect_schedule(ctx, intent, allow_bare=False)
        return self.advance(ctx)

    async def on_ask_time(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        intent = await self.extract(ctx)
        self.collect_schedule(ctx, intent, allow_bare=True)
        if not ctx.flow_data.get("timeOfDay"):
            # No usable answer: file it under the current part of the day.
            ctx.flow_data["timeOfDay"] = time_of_day_bucket(ClockTime(ctx.now.hour, ctx.now.minute))
        return self.advance(ctx)

    def title_from(self, ctx: TurnContext, intent: ParsedIntent) -> Optional[str]:
        for candidate in (intent.get("title"), ctx.text):
            cleaned = clean_words(candidate or "", _COMMAND_RE)
            if cleaned:
                return cleaned
        return None

    def collect_schedule(self, ctx: TurnContext, intent: ParsedIntent, allow_bare: bool) -> None:
        data = ctx.flow_data
        start, end = self.upcoming_times(ctx, allow_bare=allow_bare)
        if start is None and intent.get("startTime"):
            start, end = intent.get("startTime"), intent.get("endTime")

        if start:
            data["startTime"] = start
            if end:
                data["endTime"] = end
            else:
                data.pop("endTime", None)
            data["timeOfDay"] = time_of_day_bucket(start)
            return

        part = part_of_day(ctx.user_input)
        if part:
            data["timeOfDay"] = part

    def advance(self, ctx: TurnContext) -> FlowTurnResponse:
        step = self.next_slot_step(ctx.flow_data)
        if step is AddTaskStep.ASK_TITLE:
            return self.ask(ctx, step, "add_task_ask_title")
        if step is AddTaskStep.ASK_TIME:
            return self.ask(ctx, step, "add_task_ask_time", title=ctx.flow_data["title"])
        return self.complete(ctx)

    def complete(self, ctx: TurnContext) -> FlowTurnResponse:
        data = ctx.flow_data
        params = {
            "title": data["title"],
            "timeOfDay": data["timeOfDay"],
            "date": data["date"],
        }
        if data.get("startTime"):
            params["startTime"] = data["startTime"]
        if data.get("endTime"):
            params["endTime"] = data["endTime"]

        if data.get("startTime") and data.get("endTime"):
            schedule = self.say(ctx, "schedule_range", start=data["startTime"], end=data["endTime"])
        elif data.get("startTime"):
            schedule = self.say(ctx, "schedule_at", time=data["startTime"])
        else:
            schedule = self.say(ctx, f"part_{data['timeOfDay']}")

        message = self.say(
            ctx, "add_task_done", title=data["title"], day=self.day_label(ctx, data["date"]), schedule=schedule
        )
        return self.finish(ctx, message, [Action(type=ActionType.ADD_TASK, params=params)])
