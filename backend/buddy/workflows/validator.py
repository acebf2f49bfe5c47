# /buddy/workflows/validator.py

"""
Pure validation functions for flow definitions and emitted actions.

This module provides deterministic, side-effect-free checks of flow names,
steps and transitions against WORKFLOWS, plus the last-line guarantee that
every action leaving the service is well formed:
- Missing `date` on a dated action becomes the caller's today
- Missing optional params take their documented defaults
- A task with a start time but no part of day gets it from the start time
- Unknown params are dropped

No I/O, no oracle calls, no logging.
"""

from typing import Any, Dict, Optional, TypedDict

from buddy.models.flow import DATED_ACTIONS, DONE, Action, ActionType, FlowName
from buddy.services.date_service import (
    is_iso_date,
    parse_hhmm,
    parse_time_expression,
    time_of_day_bucket,
)
from buddy.workflows.definitions import ACTIONS, NOTES_MODES, REPEAT_VALUES, TIME_OF_DAY_VALUES, WORKFLOWS


class ValidationResult(TypedDict):
    """Result of a validation check."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]


def _ok() -> ValidationResult:
    return {"is_valid": True, "error_code": None, "message": None}


def _fail(code: str, message: str) -> ValidationResult:
    return {"is_valid": False, "error_code": code, "message": message}


def validate_step(flow: FlowName, step: str) -> ValidationResult:
    """A step is valid when the flow defines it (or it is the terminal step)."""
    if not step:
        return _fail("EMPTY_STEP", "Step cannot be empty")
    if step != DONE and step not in WORKFLOWS[flow]["steps"]:
        return _fail("UNKNOWN_STEP", f"Step '{step}' is not defined for flow '{flow.value}'")
    return _ok()


def validate_transition(flow: FlowName, from_step: str, to_step: str) -> ValidationResult:
    """Checks that `to_step` is reachable from `from_step` in one turn."""
    for step in (from_step, to_step):
        result = validate_step(flow, step)
        if not result["is_valid"]:
            return result
    if from_step == DONE:
        return _fail("TERMINAL_STEP", "Cannot transition out of 'done'")
    if to_step not in WORKFLOWS[flow]["steps"][from_step]:
        return _fail(
            "INVALID_TRANSITION",
            f"Flow '{flow.value}' cannot move from '{from_step}' to '{to_step}'",
        )
    return _ok()


def validate_action(action: Action) -> ValidationResult:
    """Checks that every required param is present and non-empty."""
    definition = ACTIONS[action.type]
    missing = [name for name in definition["required"] if action.params.get(name) in (None, "")]
    if missing:
        return _fail("MISSING_PARAMS", f"{action.type.value} is missing: {', '.join(missing)}")
    return _ok()


def _clean_param(action_type: ActionType, name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in ("time", "startTime", "endTime"):
        clock = parse_hhmm(value)
        if clock is None:
            # Tolerate "9 PM" style values; a bare hour stays invalid.
            match = parse_time_expression(str(value))
            if match and match.start and not match.start.ambiguous:
                clock = match.start.resolve()
        return clock.hhmm() if clock else None
    if name == "timeOfDay":
        return value if value in TIME_OF_DAY_VALUES else None
    if name == "repeat":
        return value if value in REPEAT_VALUES else None
    if name == "mode" and action_type == ActionType.UPDATE_NOTES:
        return value if value in NOTES_MODES else None
    if isinstance(value, str):
        return value.strip() or None
    return value


def ensure_action_params(action: Action, today: str) -> Action:
    """
    Returns a copy of `action` with defaults applied. Dated actions always
    leave with a valid YYYY-MM-DD `date`; anything missing or malformed
    becomes `today`.
    """
    definition = ACTIONS[action.type]
    allowed = definition["required"] + definition["optional"]
    params: Dict[str, Any] = {}
    for name in allowed:
        cleaned = _clean_param(action.type, name, action.params.get(name))
        if cleaned is not None:
            params[name] = cleaned

    for name, default in definition["defaults"].items():
        params.setdefault(name, default)

    if action.type in DATED_ACTIONS and not is_iso_date(params.get("date")):
        params["date"] = today

    if action.type == ActionType.ADD_TASK and "timeOfDay" not in params and "startTime" in params:
        params["timeOfDay"] = time_of_day_bucket(params["startTime"])

    return Action(type=action.type, params=params)
