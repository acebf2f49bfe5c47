# /buddy/models/flow.py

from enum import Enum
from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlowName(str, Enum):
    ADD_TASK = "add_task"
    ALARM = "alarm"
    REMINDER = "reminder"
    CHECK_TASK = "check_task"
    PLAN_DAY = "plan_day"
    NOTES = "notes"


class AddTaskStep(str, Enum):
    START = "start"
    ASK_TITLE = "ask_title"
    ASK_TIME = "ask_time"
    DONE = "done"


class AlarmStep(str, Enum):
    START = "start"
    ASK_TIME = "ask_time"
    ASK_AMPM = "ask_ampm"
    DONE = "done"


class ReminderStep(str, Enum):
    START = "start"
    ASK_WHAT = "ask_what"
    ASK_WHEN = "ask_when"
    DONE = "done"


class CheckTaskStep(str, Enum):
    START = "start"
    PICK_TASK = "pick_task"
    DONE = "done"


class PlanDayStep(str, Enum):
    START = "start"
    DONE = "done"


class NotesStep(str, Enum):
    START = "start"
    WRITE_NOTE = "write_note"
    DONE = "done"


FLOW_STEPS: Dict[FlowName, Type[Enum]] = {
    FlowName.ADD_TASK: AddTaskStep,
    FlowName.ALARM: AlarmStep,
    FlowName.REMINDER: ReminderStep,
    FlowName.CHECK_TASK: CheckTaskStep,
    FlowName.PLAN_DAY: PlanDayStep,
    FlowName.NOTES: NotesStep,
}

DONE = "done"


class ActionType(str, Enum):
    ADD_TASK = "add_task"
    SET_ALARM = "set_alarm"
    SET_REMINDER = "set_reminder"
    COMPLETE_TASK = "complete_task"
    DELETE_TASK = "delete_task"
    UPDATE_NOTES = "update_notes"


# Actions that must always carry a non-empty `date`.
DATED_ACTIONS = frozenset({ActionType.ADD_TASK, ActionType.SET_ALARM, ActionType.SET_REMINDER})
# Actions that create something new; the router lets at most one through per message.
CREATION_ACTIONS = DATED_ACTIONS


class TaskSummary(CamelModel):
    id: Optional[str] = None
    title: str
    time_of_day: Optional[str] = Field(default=None, description="morning | afternoon | evening")
    start_time: Optional[str] = Field(default=None, description="HH:MM, 24-hour")
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)


class TaskContext(CamelModel):
    """Read-only snapshot of the caller's task store for the current day."""
    total: int = Field(ge=0)
    completed: int = Field(ge=0)
    pending: int = Field(ge=0)
    pending_tasks: List[TaskSummary] = Field(default_factory=list)
    completed_tasks: List[TaskSummary] = Field(default_factory=list)

    @model_validator(mode="after")
    def counts_must_add_up(self):
        if self.completed + self.pending != self.total:
            raise ValueError("taskContext.completed + taskContext.pending must equal taskContext.total")
        return self


class Action(CamelModel):
    type: ActionType
    params: Dict[str, Any] = Field(default_factory=dict)


class QuickAction(CamelModel):
    label: str
    action: str


class FlowTurnRequest(CamelModel):
    flow: Optional[FlowName] = None
    step: Optional[str] = None
    user_input: str = ""
    language: Optional[str] = None
    task_context: TaskContext
    flow_data: Dict[str, Any] = Field(default_factory=dict)
    current_time: Optional[str] = Field(default=None, description="HH:MM on the caller's clock")
    current_date: Optional[str] = Field(default=None, description="YYYY-MM-DD on the caller's clock")

    @field_validator("flow", "step", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("flow_data", mode="before")
    @classmethod
    def null_flow_data(cls, v):
        return v or {}


class FlowTurnResponse(CamelModel):
    message: str
    actions: List[Action] = Field(default_factory=list)
    next_step: str = DONE
    flow: Optional[str] = None
    flow_data: Dict[str, Any] = Field(default_factory=dict)
    quick_actions: List[QuickAction] = Field(default_factory=list)
