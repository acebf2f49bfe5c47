# backend/tests/unit/test_validator.py
import pytest

from buddy.models.flow import Action, ActionType, FlowName
from buddy.workflows.definitions import ACTIONS, WORKFLOWS
from buddy.workflows.validator import ensure_action_params, validate_action, validate_step, validate_transition

TODAY = "2026-03-10"


def test_every_workflow_step_points_at_known_steps():
    for flow, definition in WORKFLOWS.items():
        assert definition["initial_step"] in definition["steps"]
        for targets in definition["steps"].values():
            for target in targets:
                assert target == "done" or target in definition["steps"], (flow, target)


def test_every_flow_action_is_defined():
    for definition in WORKFLOWS.values():
        if definition["action"] is not None:
            assert definition["action"] in ACTIONS


def test_validate_step():
    assert validate_step(FlowName.ALARM, "ask_ampm")["is_valid"]
    assert validate_step(FlowName.ALARM, "done")["is_valid"]
    assert validate_step(FlowName.ALARM, "ask_title")["error_code"] == "UNKNOWN_STEP"
    assert validate_step(FlowName.ALARM, "")["error_code"] == "EMPTY_STEP"


@pytest.mark.parametrize("flow, from_step, to_step, code", [
    (FlowName.ADD_TASK, "start", "done", None),
    (FlowName.ADD_TASK, "ask_time", "ask_title", "INVALID_TRANSITION"),
    (FlowName.ALARM, "ask_ampm", "ask_ampm", None),
    (FlowName.PLAN_DAY, "start", "start", "INVALID_TRANSITION"),
    (FlowName.NOTES, "done", "write_note", "TERMINAL_STEP"),
    (FlowName.REMINDER, "ask_when", "nowhere", "UNKNOWN_STEP"),
])
def test_validate_transition(flow, from_step, to_step, code):
    result = validate_transition(flow, from_step, to_step)
    assert result["error_code"] == code
    assert result["is_valid"] is (code is None)


def test_validate_action_reports_missing_params():
    result = validate_action(Action(type=ActionType.SET_REMINDER, params={"time": "10:00", "date": TODAY}))
    assert not result["is_valid"]
    assert "message" in result["message"]


def test_dated_action_gets_today():
    action = ensure_action_params(Action(type=ActionType.SET_ALARM, params={"time": "07:00"}), TODAY)
    assert action.params == {"time": "07:00", "date": TODAY, "label": "Alarm", "repeat": "once"}


def test_malformed_date_is_replaced():
    action = ensure_action_params(
        Action(type=ActionType.SET_REMINDER, params={"time": "10:00", "message": "call", "date": "tomorrow"}),
        TODAY,
    )
    assert action.params["date"] == TODAY


def test_add_task_derives_time_of_day_from_start():
    action = ensure_action_params(
        Action(type=ActionType.ADD_TASK, params={"title": "Gym", "startTime": "18:00", "date": "2026-03-11"}),
        TODAY,
    )
    assert action.params == {"title": "Gym", "startTime": "18:00", "date": "2026-03-11", "timeOfDay": "evening"}
    assert validate_action(action)["is_valid"]


def test_unknown_params_and_bad_values_are_dropped():
    action = ensure_action_params(
        Action(type=ActionType.SET_ALARM, params={"time": "7", "repeat": "hourly", "colour": "red"}),
        TODAY,
    )
    assert "colour" not in action.params
    assert "time" not in action.params
    assert action.params["repeat"] == "once"
    assert not validate_action(action)["is_valid"]


def test_meridiem_time_values_are_normalized():
    action = ensure_action_params(Action(type=ActionType.SET_ALARM, params={"time": "9 PM"}), TODAY)
    assert action.params["time"] == "21:00"


def test_notes_mode_defaults_to_append():
    action = ensure_action_params(Action(type=ActionType.UPDATE_NOTES, params={"content": "milk", "mode": "x"}), TODAY)
    assert action.params == {"content": "milk", "mode": "append"}
    assert "date" not in action.params
