# /buddy/workflows/flows/alarm.py

import re
from typing import Optional

from buddy.models.flow import Action, ActionType, AlarmStep, FlowName, FlowTurnResponse
from buddy.models.intent import FieldSpec
from buddy.services.date_service import RawTime, add_minutes, parse_meridiem_answer, parse_time_expression
from buddy.workflows.flows.base import FlowHandler, TurnContext, clean_words

# Alarm times are never taken from the oracle: an hour without AM/PM always
# stops at ask_ampm. The oracle only names the alarm.

_COMMAND_RE = re.compile(
    r"\b(?:set|laga|lagao|lagado|laga\s+do|rakho|rakh\s+do|create|new|an?)\b"
    r"|\balarms?\b|\bwake\s+me(?:\s+up)?\b|\b(?:jagana|jaga\s+dena|utha\s+dena|uthana)\b"
    r"|\b(?:daily|every\s*day|everyday|roz|rozana|har\s+din|weekdays|weekends|every)\b"
    r"|\b\d{1,2}(?:[:.]\d{2})?\b",
    re.I,
)
_DAILY_RE = re.compile(r"\b(?:daily|every\s*day|everyday|each\s+day|roz|rozana|har\s+din)\b", re.I)
_CUSTOM_RE = re.compile(
    r"\b(?:weekdays|weekends|every\s+(?:mon|tues|wednes|thurs|fri|satur|sun)day|har\s+\w+var)\b", re.I
)


def detect_repeat(text: str) -> Optional[str]:
    if _DAILY_RE.search(text or ""):
        return "daily"
    if _CUSTOM_RE.search(text or ""):
        return "custom"
    return None


class AlarmFlow(FlowHandler):
    flow = FlowName.ALARM
    steps = AlarmStep
    schema = {
        "label": FieldSpec(description="short alarm label like 'wake up' or 'gym', without time words"),
    }

    def step_handlers(self):
        return {
            AlarmStep.START: self.on_start,
            AlarmStep.ASK_TIME: self.on_ask_time,
            AlarmStep.ASK_AMPM: self.on_ask_ampm,
        }

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        await self.collect_label(ctx)
        ctx.flow_data["repeat"] = detect_repeat(ctx.user_input) or ctx.flow_data.get("repeat") or "once"
        return self.read_time(ctx, allow_bare=True)

    async def on_ask_time(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        repeat = detect_repeat(ctx.user_input)
        if repeat:
            ctx.flow_data["repeat"] = repeat
        return self.read_time(ctx, allow_bare=True)

    async def on_ask_ampm(self, ctx: TurnContext) -> FlowTurnResponse:
        self.apply_date(ctx)
        data = ctx.flow_data

        # A full answer like "7:30 pm" replaces the pending hour outright.
        match = parse_time_expression(ctx.user_input, allow_bare=False)
        if match and (match.is_relative or (match.start and not match.start.ambiguous)):
            return self.read_time(ctx, allow_bare=False)

        if data.get("hour") is None:
            return self.ask(ctx, AlarmStep.ASK_TIME, "alarm_ask_time")

        pending = RawTime(int(data["hour"]), int(data.get("minute") or 0))
        meridiem = parse_meridiem_answer(ctx.user_input)
        if meridiem is None:
            return self.ask(ctx, AlarmStep.ASK_AMPM, "alarm_ask_ampm_retry", time=pending.display())

        data["time"] = pending.resolve(meridiem).hhmm()
        return self.complete(ctx)

    async def collect_label(self, ctx: TurnContext) -> None:
        leftover = clean_words(ctx.text, _COMMAND_RE)
        if not leftover:
            return
        intent = await self.extract(ctx)
        label = clean_words(intent.get("label") or "", _COMMAND_RE) or leftover
        ctx.flow_data["label"] = label

    def read_time(self, ctx: TurnContext, allow_bare: bool) -> FlowTurnResponse:
        data = ctx.flow_data
        match = parse_time_expression(ctx.user_input, allow_bare=allow_bare)
        if match is None or (match.start is None and not match.is_relative):
            return self.ask(ctx, AlarmStep.ASK_TIME, "alarm_ask_time")

        if match.is_relative:
            data["date"], data["time"] = add_minutes(ctx.now, match.relative_minutes)
            return self.complete(ctx)

        raw = match.start
        if raw.ambiguous:
            data["hour"], data["minute"] = raw.hour, raw.minute
            data.pop("time", None)
            return self.ask(ctx, AlarmStep.ASK_AMPM, "alarm_ask_ampm", time=raw.display())

        data["time"] = raw.resolve().hhmm()
        return self.complete(ctx)

    def complete(self, ctx: TurnContext) -> FlowTurnResponse:
        data = ctx.flow_data
        params = {
            "time": data["time"],
            "date": data["date"],
            "label": data.get("label") or "Alarm",
            "repeat": data.get("repeat") or "once",
        }
        message = self.say(
            ctx,
            "alarm_done",
            label=params["label"],
            day=self.day_label(ctx, params["date"]),
            time=params["time"],
            repeat=self.say(ctx, f"repeat_{params['repeat']}"),
        )
        return self.finish(ctx, message, [Action(type=ActionType.SET_ALARM, params=params)])
