# /buddy/workflows/flows/base.py

import re
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type

from buddy.models.flow import DONE, Action, FlowName, FlowTurnResponse, QuickAction, TaskContext
from buddy.models.intent import ExtractionSchema, ParsedIntent
from buddy.services.ai_service import AIService
from buddy.services.date_service import (
    ClockTime,
    add_minutes,
    find_date,
    next_day,
    parse_time_expression,
    resolve_upcoming,
    strip_temporal,
)
from buddy.services.extraction_service import ExtractionService
from buddy.services.string_service import StringService
from buddy.workflows.definitions import WORKFLOWS


@dataclass
class TurnContext:
    """Everything a flow handler may look at for one turn."""
    flow: FlowName
    step: Enum
    user_input: str
    flow_data: Dict[str, Any]
    task_context: TaskContext
    language: str
    now: datetime
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def today(self) -> str:
        return self.now.date().isoformat()

    @property
    def text(self) -> str:
        return self.user_input.strip()


StepHandler = Callable[[TurnContext], Awaitable[FlowTurnResponse]]

# Hours without AM/PM on a later day are read as daytime hours.
DAYTIME_START_HOUR = 5

_PUNCT_RE = re.compile(r"[^\w\s'&/+-]", re.UNICODE)

# Words that carry no subject when they sit at either end of a phrase.
FILLER_WORDS = frozenset({
    "a", "an", "the", "and", "to", "for", "at", "on", "by", "in", "is", "it", "of", "about",
    "please", "pls", "i", "me", "my", "need", "have", "want", "from", "till", "until",
    "pe", "par", "se", "tak", "ko", "ke", "ka", "ki", "hai", "h", "hain", "ek", "mera", "meri",
    "mujhe", "karna", "krna", "karni", "karo", "kro", "kar", "do", "de", "dena", "mein", "mai",
    "baje", "bje", "wala", "wali", "ye", "yeh", "wo", "woh",
})


def clean_words(text: str, command: "re.Pattern", filler=FILLER_WORDS) -> str:
    """
    Drops temporal phrases and command words, then trims filler from both
    ends so that "kal gym karna hai 6am" leaves "gym" but "go to gym" stays.
    """
    stripped = command.sub(" ", strip_temporal(text or ""))
    words = _PUNCT_RE.sub(" ", stripped).split()
    while words and words[0].lower() in filler:
        words.pop(0)
    while words and words[-1].lower() in filler:
        words.pop()
    return " ".join(words)


def default_quick_actions(strings: StringService, language: str) -> List[QuickAction]:
    return [
        QuickAction(label=strings.render("qa_add_task", language), action="add_task"),
        QuickAction(label=strings.render("qa_alarm", language), action="alarm"),
        QuickAction(label=strings.render("qa_reminder", language), action="reminder"),
        QuickAction(label=strings.render("qa_check_task", language), action="check_task"),
        QuickAction(label=strings.render("qa_plan_day", language), action="plan_day"),
        QuickAction(label=strings.render("qa_notes", language), action="notes"),
    ]


class FlowHandler:
    """
    Base class for one conversational flow.

    Subclasses map every non-terminal step of their step enum to a coroutine
    in `step_handlers()`; the mapping is checked for completeness on
    construction so an unhandled step fails at import time, not mid-chat.
    """

    flow: FlowName
    steps: Type[Enum]
    schema: ExtractionSchema = {}

    def __init__(self, extractor: ExtractionService, ai: AIService, strings: StringService):
        self.extractor = extractor
        self.ai = ai
        self.strings = strings
        self._handlers = self.step_handlers()
        expected = {s for s in self.steps if s.value != DONE}
        missing = expected - set(self._handlers)
        if missing:
            raise RuntimeError(
                f"{type(self).__name__} has no handler for steps: {sorted(s.value for s in missing)}"
            )

    def step_handlers(self) -> Dict[Enum, StepHandler]:
        raise NotImplementedError

    async def handle(self, ctx: TurnContext) -> FlowTurnResponse:
        return await self._handlers[ctx.step](ctx)

    # ---------------- helpers shared by flows ---------------- #

    def say(self, ctx: TurnContext, key: str, **kwargs) -> str:
        return self.strings.render(key, ctx.language, **kwargs)

    def ask(self, ctx: TurnContext, step: Enum, key: str, **kwargs) -> FlowTurnResponse:
        """Asks the next question and stays in the flow."""
        return FlowTurnResponse(
            message=self.say(ctx, key, **kwargs),
            next_step=step.value,
            flow=self.flow.value,
            flow_data=ctx.flow_data,
        )

    def finish(self, ctx: TurnContext, message: str, actions: Optional[List[Action]] = None) -> FlowTurnResponse:
        """Terminal turn: the caller discards its session after this."""
        return FlowTurnResponse(
            message=message,
            actions=actions or [],
            next_step=DONE,
            flow=self.flow.value,
            flow_data={},
        )

    def next_slot_step(self, data: Dict[str, Any]) -> Optional[Enum]:
        """Step asking for the first unfilled slot, or None when all are filled."""
        for name, step in WORKFLOWS[self.flow]["slots"]:
            if data.get(name) in (None, ""):
                return self.steps(step)
        return None

    async def extract(self, ctx: TurnContext) -> ParsedIntent:
        context = f"flow={self.flow.value}; step={ctx.step.value}; known={ctx.flow_data}"
        return await self.extractor.extract(self.schema, context, ctx.text)

    def apply_date(self, ctx: TurnContext) -> str:
        """
        A date named in this turn wins; otherwise the one collected earlier
        in the session; otherwise the caller's today.
        """
        named = find_date(ctx.now, ctx.user_input)
        if named:
            ctx.flow_data["date"] = named
        elif not ctx.flow_data.get("date"):
            ctx.flow_data["date"] = ctx.today
        return ctx.flow_data["date"]

    def upcoming_times(self, ctx: TurnContext, allow_bare: bool = False) -> Tuple[Optional[str], Optional[str]]:
        """
        Deterministic (start, end) HH:MM for this turn's text. An hour without
        AM/PM resolves to the next upcoming one today, or to the daytime one
        on a later day. Relative offsets also move `date` when they cross
        midnight.
        """
        match = parse_time_expression(ctx.user_input, allow_bare=allow_bare)
        if match is None:
            return None, None
        if match.is_relative:
            day, hhmm = add_minutes(ctx.now, match.relative_minutes)
            ctx.flow_data["date"] = day
            return hhmm, None

        reference = ctx.now
        if ctx.flow_data.get("date", ctx.today) != ctx.today:
            reference = datetime.combine(ctx.now.date(), time(DAYTIME_START_HOUR))
        start = resolve_upcoming(match.start, reference)
        if match.end is None:
            return start.hhmm(), None
        end = resolve_upcoming(match.end, reference)
        if end.minutes() < start.minutes() and match.end.ambiguous:
            end = max(match.end.resolve("am"), match.end.resolve("pm"), key=ClockTime.minutes)
        return start.hhmm(), end.hhmm()

    def day_label(self, ctx: TurnContext, iso_date: str) -> str:
        if iso_date == ctx.today:
            return self.say(ctx, "day_today")
        if iso_date == next_day(ctx.today):
            return self.say(ctx, "day_tomorrow")
        return self.say(ctx, "day_on", date=iso_date)
