# /buddy/services/tool_router.py

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from buddy.config.persona import LANGUAGE_GUIDE, ROUTER_MODE_INSTRUCTIONS, ROUTER_SYSTEM_PROMPT
from buddy.config.settings import settings
from buddy.models.api import AdvancedChatResponse, ChatMessage
from buddy.models.flow import CREATION_ACTIONS, Action, ActionType, TaskContext, TaskSummary
from buddy.services.ai_service import SMART, AIService, ai_service
from buddy.services.date_service import next_day
from buddy.services.string_service import StringService, normalize_language, string_service
from buddy.utils.errors import OracleFault
from buddy.utils.metrics import actions_counter, router_truncations_counter
from buddy.workflows.validator import ensure_action_params, validate_action

# The tool router is the autonomous single-turn mode: the oracle sees the recent
# chat history plus a live task snapshot and may call any of the tools below.
# Its output is untrusted and passes through the same action normalization as
# the guided flows, plus a guardrail allowing one creation per reply.

logger = logging.getLogger(__name__)

_TIME_HINT = "HH:MM 24-hour. Extract it whenever the user mentions a time."
_DATE_HINT = "YYYY-MM-DD. TODAY unless the user says tomorrow/kal or names a date."

TOOLS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "add_task",
            "description": "Add a task to today's list (or another day's, when the user names one).",
            "parameters": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Short task title without time words"},
                    "timeOfDay": {
                        "type": "string",
                        "enum": ["morning", "afternoon", "evening"],
                        "description": "morning (5am-12pm), afternoon (12pm-5pm), evening (5pm-5am)",
                    },
                    "startTime": {"type": "string", "description": _TIME_HINT},
                    "endTime": {"type": "string", "description": "HH:MM 24-hour. Optional end time."},
                    "date": {"type": "string", "description": _DATE_HINT},
                },
                "required": ["title", "timeOfDay"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "set_alarm",
            "description": "Set an alarm that rings at a clock time.",
            "parameters": {
                "type": "object",
                "properties": {
                    "time": {"type": "string", "description": _TIME_HINT},
                    "date": {"type": "string", "description": _DATE_HINT},
                    "label": {"type": "string", "description": "Short alarm label, e.g. 'Wake up'"},
                    "repeat": {"type": "string", "enum": ["once", "daily", "custom"]},
                },
                "required": ["time"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "set_reminder",
            "description": "Notify the user at a time without adding a task to their list.",
            "parameters": {
                "type": "object",
                "properties": {
                    "time": {"type": "string", "description": _TIME_HINT},
                    "message": {"type": "string", "description": "What to remind the user about"},
                    "date": {"type": "string", "description": _DATE_HINT},
                },
                "required": ["time", "message"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "complete_task",
            "description": "Mark a task done. Use the EXACT task title from the pending tasks list.",
            "parameters": {
                "type": "object",
                "properties": {
                    "taskTitle": {"type": "string", "description": "EXACT title from the pending tasks list"},
                },
                "required": ["taskTitle"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "delete_task",
            "description": "Delete a task. Use the EXACT task title from the tasks list.",
            "parameters": {
                "type": "object",
                "properties": {
                    "taskTitle": {"type": "string", "description": "EXACT title from the tasks list"},
                },
                "required": ["taskTitle"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "update_notes",
            "description": "Update the daily notes when the user dictates content.",
            "parameters": {
                "type": "object",
                "properties": {
                    "content": {"type": "string", "description": "Text to add to the notes"},
                    "mode": {
                        "type": "string",
                        "enum": ["append", "replace"],
                        "description": "append=add to existing, replace=overwrite",
                    },
                },
                "required": ["content"],
            },
        },
    },
]


def _task_lines(tasks: Sequence[TaskSummary]) -> str:
    lines = []
    for number, task in enumerate(tasks, start=1):
        at = f" at {task.start_time}" if task.start_time else ""
        lines.append(f'  {number}. "{task.title}" ({task.time_of_day or "anytime"}){at}')
    return "\n".join(lines)


def build_task_snapshot(task_context: TaskContext) -> str:
    if task_context.total == 0:
        return "The user has NO tasks added for today yet."
    parts = [
        "TODAY'S TASK SNAPSHOT:",
        f"- Total: {task_context.total} | Completed: {task_context.completed} | Pending: {task_context.pending}",
    ]
    if task_context.completed_tasks:
        parts.append("Completed tasks:\n" + _task_lines(task_context.completed_tasks))
    if task_context.pending_tasks:
        parts.append("Pending tasks:\n" + _task_lines(task_context.pending_tasks))
    return "\n".join(parts)


def build_system_prompt(language: str, task_context: TaskContext, mode: str, now: datetime) -> str:
    guide = LANGUAGE_GUIDE[language]
    today = now.date().isoformat()
    prompt = ROUTER_SYSTEM_PROMPT.format(
        language_rule=guide["rule"],
        language_tone=guide["tone"],
        task_snapshot=build_task_snapshot(task_context),
        current_time=now.strftime("%H:%M"),
        today=today,
        tomorrow=next_day(today),
    )
    extra = ROUTER_MODE_INSTRUCTIONS.get(mode, "")
    return f"{prompt}\n\n{extra}" if extra else prompt


def truncate_history(messages: Sequence[ChatMessage], limit: Optional[int] = None) -> List[ChatMessage]:
    limit = settings.history_limit if limit is None else limit
    return list(messages)[-limit:] if limit > 0 else []


def decode_tool_calls(tool_calls) -> List[Action]:
    """Turns oracle tool calls into actions, skipping unknown tools and bad arguments."""
    actions = []
    for call in tool_calls or []:
        name = call.function.name
        try:
            action_type = ActionType(name)
        except ValueError:
            logger.warning(f"Oracle called unknown tool '{name}', skipping it.")
            continue
        try:
            params = json.loads(call.function.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning(f"Oracle sent invalid JSON arguments for '{name}', skipping it.")
            continue
        if not isinstance(params, dict):
            logger.warning(f"Oracle sent non-object arguments for '{name}', skipping it.")
            continue
        actions.append(Action(type=action_type, params=params))
    return actions


def limit_creations(actions: List[Action]) -> Tuple[List[Action], int]:
    """Keeps the first creation action and every non-creation action."""
    kept, dropped, created = [], 0, False
    for action in actions:
        if action.type in CREATION_ACTIONS:
            if created:
                dropped += 1
                continue
            created = True
        kept.append(action)
    return kept, dropped


class ToolRouter:
    def __init__(self, ai: Optional[AIService] = None, strings: Optional[StringService] = None):
        self.ai = ai or ai_service
        self.strings = strings or string_service

    async def route(
        self,
        messages: Sequence[ChatMessage],
        task_context: TaskContext,
        now: datetime,
        language: Optional[str] = None,
        mode: str = "chat",
    ) -> AdvancedChatResponse:
        """One autonomous turn: free chat in, reply text plus actions out."""
        language = normalize_language(language)
        history = truncate_history(messages)
        payload = [{"role": "system", "content": build_system_prompt(language, task_context, mode, now)}]
        payload.extend({"role": m.role, "content": m.content} for m in history)

        try:
            reply = await self.ai.complete(payload, SMART, tools=TOOLS, temperature=0.7, max_tokens=300)
        except OracleFault as e:
            logger.error(f"Tool router oracle call failed: {e}")
            return AdvancedChatResponse(type="message", message=self.strings.render("generic_error", language))

        today = now.date().isoformat()
        actions = []
        for action in decode_tool_calls(getattr(reply, "tool_calls", None)):
            action = ensure_action_params(action, today)
            check = validate_action(action)
            if not check["is_valid"]:
                logger.warning(f"Dropping incomplete action from the router: {check['message']}")
                continue
            actions.append(action)

        actions, dropped = limit_creations(actions)
        message = (reply.content or "").strip()
        if not message:
            message = self.strings.render("done_generic" if actions else "hmm", language)
        if dropped:
            router_truncations_counter.inc(dropped)
            message = f"{message}\n\n{self.strings.render('one_at_a_time', language, remaining=dropped)}"

        for action in actions:
            actions_counter.labels(type=action.type.value, source="router").inc()
        return AdvancedChatResponse(type="actions" if actions else "message", message=message, actions=actions)


# Globally accessible instance
tool_router = ToolRouter()
