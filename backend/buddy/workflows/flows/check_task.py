# /buddy/workflows/flows/check_task.py

import re
from typing import List, Optional

from buddy.models.flow import Action, ActionType, CheckTaskStep, FlowName, FlowTurnResponse, TaskSummary
from buddy.workflows.flows.base import FlowHandler, TurnContext

# Task matching is deterministic: a 1-based number from the listed tasks, an
# exact title, or a substring match in either direction. No oracle call.

_DELETE_RE = re.compile(r"\b(?:delete|remove|hata|hatao|hata\s+do|nikal|nikalo|mita|mitao|cancel\s+task)\b", re.I)
_COMMAND_RE = re.compile(
    r"\b(?:ho\s+gaya|ho\s+gya|hogaya|kar\s+liya|kr\s+liya|kar\s+diya|kr\s+diya|done|complete[d]?|finish(?:ed)?"
    r"|mark(?:ed)?|as|check(?:ed)?|tick|delete|remove|hata(?:o)?|nikal(?:o)?|mita(?:o)?|do|karo|kar|de"
    r"|please|pls|maine|i|have|has|been|is|the|it|my|mera|meri|wala|wali|ka|ki|ke|task|tasks|number|no)\b",
    re.I,
)
_PUNCT_RE = re.compile(r"[^\w\s]", re.UNICODE)


def normalize(text: str) -> str:
    return re.sub(r"\s+", " ", _PUNCT_RE.sub(" ", (text or "").lower())).strip()


def match_task(query: str, tasks: List[TaskSummary]) -> Optional[TaskSummary]:
    """Resolves a user reply to one of `tasks`, or None."""
    if not tasks:
        return None
    raw = normalize(query)
    if not raw:
        return None

    cleaned = normalize(_COMMAND_RE.sub(" ", raw))
    for candidate in (raw, cleaned):
        if candidate.isdigit():
            index = int(candidate) - 1
            return tasks[index] if 0 <= index < len(tasks) else None

    titles = [normalize(task.title) for task in tasks]
    for candidate in (raw, cleaned):
        for task, title in zip(tasks, titles):
            if candidate and candidate == title:
                return task

    if not cleaned:
        return None
    for task, title in zip(tasks, titles):
        if title and (cleaned in title or title in raw):
            return task
    return None


def format_task_list(tasks: List[TaskSummary]) -> str:
    lines = []
    for number, task in enumerate(tasks, start=1):
        suffix = f" ({task.start_time})" if task.start_time else ""
        lines.append(f"{number}. {task.title}{suffix}")
    return "\n".join(lines)


class CheckTaskFlow(FlowHandler):
    flow = FlowName.CHECK_TASK
    steps = CheckTaskStep

    def step_handlers(self):
        return {
            CheckTaskStep.START: self.on_start,
            CheckTaskStep.PICK_TASK: self.on_pick_task,
        }

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        tasks = ctx.task_context.pending_tasks
        if ctx.task_context.pending == 0 or not tasks:
            return self.finish(ctx, self.say(ctx, "check_all_done"))

        ctx.flow_data["mode"] = "delete" if _DELETE_RE.search(ctx.user_input) else (
            ctx.flow_data.get("mode") or "complete"
        )
        task = match_task(ctx.user_input, tasks)
        if task:
            return self.complete(ctx, task)

        query = normalize(_COMMAND_RE.sub(" ", normalize(ctx.user_input)))
        if query:
            return self.ask(ctx, CheckTaskStep.PICK_TASK, "check_no_match",
                            query=ctx.text, task_list=format_task_list(tasks))
        key = "delete_ask_pick" if ctx.flow_data["mode"] == "delete" else "check_ask_pick"
        return self.ask(ctx, CheckTaskStep.PICK_TASK, key, task_list=format_task_list(tasks))

    async def on_pick_task(self, ctx: TurnContext) -> FlowTurnResponse:
        tasks = ctx.task_context.pending_tasks
        if ctx.task_context.pending == 0 or not tasks:
            return self.finish(ctx, self.say(ctx, "check_all_done"))

        task = match_task(ctx.user_input, tasks)
        if task:
            return self.complete(ctx, task)
        return self.ask(ctx, CheckTaskStep.PICK_TASK, "check_no_match",
                        query=ctx.text, task_list=format_task_list(tasks))

    def complete(self, ctx: TurnContext, task: TaskSummary) -> FlowTurnResponse:
        if ctx.flow_data.get("mode") == "delete":
            action = Action(type=ActionType.DELETE_TASK, params={"taskTitle": task.title})
            return self.finish(ctx, self.say(ctx, "delete_done", title=task.title), [action])
        action = Action(type=ActionType.COMPLETE_TASK, params={"taskTitle": task.title})
        return self.finish(ctx, self.say(ctx, "check_done", title=task.title), [action])
