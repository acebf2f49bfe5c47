# /buddy/workflows/definitions.py

"""
Flow and action definitions as pure data (no logic).

Each flow specifies:
- initial_step: The starting step name
- action: The action type emitted at `done` (None for informational flows)
- slots: Ordered (field, step) pairs. The first missing field decides which
  question is asked next, so the order is the question priority
- steps: A dictionary mapping step names to the steps it may move to

Each action specifies its required params, optional params and defaults.
"""

from typing import Any, Dict, List, Optional, Tuple, TypedDict

from buddy.models.flow import ActionType, FlowName


class WorkflowDefinition(TypedDict):
    initial_step: str
    action: Optional[ActionType]
    slots: List[Tuple[str, str]]
    steps: Dict[str, List[str]]


class ActionDefinition(TypedDict):
    required: List[str]
    optional: List[str]
    defaults: Dict[str, Any]


WORKFLOWS: Dict[FlowName, WorkflowDefinition] = {
    FlowName.ADD_TASK: {
        "initial_step": "start",
        "action": ActionType.ADD_TASK,
        "slots": [("title", "ask_title"), ("timeOfDay", "ask_time")],
        "steps": {
            "start": ["ask_title", "ask_time", "done"],
            # ask_title repeats only when the answer was empty
            "ask_title": ["ask_title", "ask_time", "done"],
            "ask_time": ["done"],
        },
    },
    FlowName.ALARM: {
        "initial_step": "start",
        "action": ActionType.SET_ALARM,
        "slots": [("time", "ask_time")],
        "steps": {
            "start": ["ask_time", "ask_ampm", "done"],
            "ask_time": ["ask_time", "ask_ampm", "done"],
            # ask_ampm re-asks on an unclear answer and recovers to ask_time if the hour was lost
            "ask_ampm": ["ask_ampm", "ask_time", "done"],
        },
    },
    FlowName.REMINDER: {
        "initial_step": "start",
        "action": ActionType.SET_REMINDER,
        "slots": [("message", "ask_what"), ("time", "ask_when")],
        "steps": {
            "start": ["ask_what", "ask_when", "done"],
            "ask_what": ["ask_what", "ask_when", "done"],
            "ask_when": ["ask_when", "done"],
        },
    },
    FlowName.CHECK_TASK: {
        "initial_step": "start",
        "action": ActionType.COMPLETE_TASK,
        "slots": [("taskTitle", "pick_task")],
        "steps": {
            "start": ["pick_task", "done"],
            "pick_task": ["pick_task", "done"],
        },
    },
    FlowName.PLAN_DAY: {
        "initial_step": "start",
        "action": None,
        "slots": [],
        "steps": {
            "start": ["done"],
        },
    },
    FlowName.NOTES: {
        "initial_step": "start",
        "action": ActionType.UPDATE_NOTES,
        "slots": [("content", "write_note")],
        "steps": {
            "start": ["write_note", "done"],
            "write_note": ["write_note", "done"],
        },
    },
}


ACTIONS: Dict[ActionType, ActionDefinition] = {
    ActionType.ADD_TASK: {
        "required": ["title", "timeOfDay", "date"],
        "optional": ["startTime", "endTime"],
        "defaults": {},
    },
    ActionType.SET_ALARM: {
        "required": ["time", "date"],
        "optional": ["label", "repeat"],
        "defaults": {"label": "Alarm", "repeat": "once"},
    },
    ActionType.SET_REMINDER: {
        "required": ["time", "message", "date"],
        "optional": [],
        "defaults": {},
    },
    ActionType.COMPLETE_TASK: {
        "required": ["taskTitle"],
        "optional": [],
        "defaults": {},
    },
    ActionType.DELETE_TASK: {
        "required": ["taskTitle"],
        "optional": [],
        "defaults": {},
    },
    ActionType.UPDATE_NOTES: {
        "required": ["content"],
        "optional": ["mode"],
        "defaults": {"mode": "append"},
    },
}

TIME_OF_DAY_VALUES = ("morning", "afternoon", "evening")
REPEAT_VALUES = ("once", "daily", "custom")
NOTES_MODES = ("append", "replace")
