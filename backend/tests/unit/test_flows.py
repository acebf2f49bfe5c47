# backend/tests/unit/test_flows.py
from datetime import datetime

import pytest

from conftest import FakeExtractor
from buddy.models.flow import ActionType, FlowName, TaskContext, TaskSummary
from buddy.services.string_service import StringService
from buddy.utils.errors import ExtractionFault
from buddy.workflows.detection import detect_flow, is_cancel
from buddy.workflows.flows.alarm import detect_repeat
from buddy.workflows.flows.check_task import format_task_list, match_task
from buddy.workflows.flows.notes import split_note
from buddy.workflows.flows.plan_day import order_tasks

strings = StringService()


def english(key, **kwargs):
    return strings.render(key, "english", **kwargs)


# --- Detection ---

@pytest.mark.parametrize("text, flow", [
    ("add task market 9 to 11 am", FlowName.ADD_TASK),
    ("kal gym karna hai", FlowName.ADD_TASK),
    ("set alarm 7", FlowName.ALARM),
    ("remind me to drink water", FlowName.REMINDER),
    ("notes: buy milk", FlowName.NOTES),
    ("plan my day", FlowName.PLAN_DAY),
    ("gym ho gaya", FlowName.CHECK_TASK),
    ("add task finish homework at 5pm", FlowName.ADD_TASK),
    ("add task complete assignment", FlowName.ADD_TASK),
    ("add task write notes for class", FlowName.ADD_TASK),
    ("new task: delete old photos", FlowName.ADD_TASK),
    ("remind me to mark attendance", FlowName.REMINDER),
    ("remind me to set alarm for tomorrow", FlowName.REMINDER),
    ("set alarm and add task for gym", FlowName.ALARM),
    ("hello there", None),
    ("", None),
])
def test_detect_flow(text, flow):
    assert detect_flow(text) == flow


def test_cancel_must_be_the_whole_reply():
    assert is_cancel("cancel")
    assert is_cancel("  Rehne do! ")
    assert not is_cancel("cancel the gym task and add yoga")


# --- add_task ---

@pytest.mark.asyncio
async def test_add_task_completes_in_one_turn(make_engine, task_context, now):
    response = await make_engine().step(None, None, "add task market 9 to 11 am", task_context, now, "english")

    assert response.next_step == "done"
    assert response.flow == "add_task"
    assert response.flow_data == {}
    assert [a.params for a in response.actions] == [{
        "title": "market",
        "timeOfDay": "morning",
        "date": "2026-03-10",
        "startTime": "09:00",
        "endTime": "11:00",
    }]
    assert response.message == english("add_task_done", title="market", day="today", schedule="09:00 - 11:00")


@pytest.mark.asyncio
async def test_add_task_asks_for_time_then_completes(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "add task gym", task_context, now, "english")

    assert first.next_step == "ask_time"
    assert first.actions == []
    assert first.flow_data["title"] == "gym"
    assert first.message == english("add_task_ask_time", title="gym")

    second = await engine.step(FlowName.ADD_TASK, "ask_time", "6pm", task_context, now, "english", first.flow_data)
    action = second.actions[0]
    assert second.next_step == "done"
    assert action.params["startTime"] == "18:00"
    assert action.params["timeOfDay"] == "evening"
    assert action.params["title"] == "gym"
    assert action.params["date"] == "2026-03-10"


@pytest.mark.asyncio
async def test_add_task_keeps_first_turn_date_until_done(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "add task gym kal", task_context, now, "english")

    assert first.next_step == "ask_time"
    assert first.flow_data["date"] == "2026-03-11"

    second = await engine.step(FlowName.ADD_TASK, "ask_time", "6pm", task_context, now, "english", first.flow_data)
    assert second.next_step == "done"
    assert second.actions[0].params == {
        "title": "gym", "timeOfDay": "evening", "date": "2026-03-11", "startTime": "18:00",
    }
    assert second.message == english(
        "add_task_done", title="gym", day="tomorrow", schedule=english("schedule_at", time="18:00")
    )


@pytest.mark.asyncio
async def test_add_task_date_named_later_replaces_earlier_one(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "add task gym kal", task_context, now, "english")
    second = await engine.step(
        FlowName.ADD_TASK, "ask_time", "6pm parso", task_context, now, "english", first.flow_data
    )
    assert second.actions[0].params["date"] == "2026-03-12"
    assert second.actions[0].params["startTime"] == "18:00"


@pytest.mark.asyncio
async def test_add_task_past_bare_time_keeps_afternoon_reading(make_engine, task_context, now):
    response = await make_engine().step(
        FlowName.ADD_TASK, "ask_time", "12:30", task_context, now, "english",
        {"title": "lunch", "date": "2026-03-10"},
    )
    assert response.actions[0].params == {
        "title": "lunch", "timeOfDay": "afternoon", "date": "2026-03-10", "startTime": "12:30",
    }


@pytest.mark.asyncio
async def test_add_task_title_with_completion_words_is_still_added(make_engine, now):
    context = TaskContext(
        total=2,
        completed=0,
        pending=2,
        pending_tasks=[
            TaskSummary(id=1, title="homework", time_of_day="evening"),
            TaskSummary(id=2, title="assignment", time_of_day="morning"),
        ],
    )
    engine = make_engine()

    homework = await engine.step(None, None, "add task finish homework at 5pm", context, now, "english")
    assert homework.flow == "add_task"
    assert [a.type for a in homework.actions] == [ActionType.ADD_TASK]
    assert homework.actions[0].params["title"] == "finish homework"
    assert homework.actions[0].params["startTime"] == "17:00"

    assignment = await engine.step(None, None, "add task complete assignment", context, now, "english")
    assert assignment.flow == "add_task"
    assert assignment.next_step == "ask_time"
    assert assignment.flow_data["title"] == "complete assignment"


@pytest.mark.asyncio
async def test_add_task_unclear_time_uses_current_part_of_day(make_engine, task_context, now):
    engine = make_engine()
    response = await engine.step(
        FlowName.ADD_TASK, "ask_time", "koi bhi", task_context, now, "english",
        {"title": "gym", "date": "2026-03-10"},
    )
    assert response.next_step == "done"
    assert response.actions[0].params["timeOfDay"] == "afternoon"
    assert "startTime" not in response.actions[0].params


@pytest.mark.asyncio
async def test_add_task_tomorrow_morning(make_engine, task_context, now):
    response = await make_engine().step(None, None, "add task gym kal subah 7 baje", task_context, now)
    assert response.actions[0].params == {
        "title": "gym", "timeOfDay": "morning", "date": "2026-03-11", "startTime": "07:00",
    }


@pytest.mark.asyncio
async def test_add_task_asks_for_title_when_only_a_command(make_engine, task_context, now):
    response = await make_engine().step(None, None, "add task", task_context, now, "english")
    assert response.next_step == "ask_title"
    assert response.message == english("add_task_ask_title")


@pytest.mark.asyncio
async def test_add_task_falls_back_to_extracted_time(make_engine, task_context, now):
    engine = make_engine(extractor=FakeExtractor(title="Team standup", startTime="10:00"))
    response = await engine.step(None, None, "add task standup with the team", task_context, now)
    params = response.actions[0].params
    assert params["title"] == "Team standup"
    assert params["startTime"] == "10:00"
    assert params["timeOfDay"] == "morning"


# --- alarm ---

@pytest.mark.asyncio
async def test_alarm_without_meridiem_asks_am_pm(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "set alarm 7", task_context, now, "english")

    assert first.next_step == "ask_ampm"
    assert first.message == english("alarm_ask_ampm", time="7:00")

    unclear = await engine.step(FlowName.ALARM, "ask_ampm", "haan", task_context, now, "english", first.flow_data)
    assert unclear.next_step == "ask_ampm"
    assert unclear.message == english("alarm_ask_ampm_retry", time="7:00")

    done = await engine.step(FlowName.ALARM, "ask_ampm", "pm", task_context, now, "english", unclear.flow_data)
    assert done.next_step == "done"
    assert done.actions[0].params == {"time": "19:00", "date": "2026-03-10", "label": "Alarm", "repeat": "once"}


@pytest.mark.asyncio
async def test_alarm_full_time_and_repeat_in_one_turn(make_engine, task_context, now):
    extractor = FakeExtractor()
    response = await make_engine(extractor=extractor).step(None, None, "wake me up at 6:30 am daily", task_context, now)

    assert response.next_step == "done"
    assert response.actions[0].params == {"time": "06:30", "date": "2026-03-10", "label": "Alarm", "repeat": "daily"}
    # nothing left to name, so no oracle call
    assert extractor.calls == []


@pytest.mark.asyncio
async def test_alarm_label_comes_from_leftover_words(make_engine, task_context, now):
    response = await make_engine().step(None, None, "set alarm for gym at 5:45 am", task_context, now)
    assert response.actions[0].params["label"] == "gym"
    assert response.actions[0].params["time"] == "05:45"


@pytest.mark.asyncio
async def test_alarm_asks_time_when_none_given(make_engine, task_context, now):
    response = await make_engine().step(None, None, "alarm laga do", task_context, now, "english")
    assert response.next_step == "ask_time"
    assert response.message == english("alarm_ask_time")


def test_detect_repeat():
    assert detect_repeat("har din 6 baje") == "daily"
    assert detect_repeat("weekdays at 7") == "custom"
    assert detect_repeat("tomorrow 7am") is None


# --- reminder ---

@pytest.mark.asyncio
async def test_reminder_relative_time(make_engine, task_context, now):
    response = await make_engine().step(None, None, "remind me in 10 minutes to drink water", task_context, now)
    assert response.actions[0].params == {"time": "14:10", "message": "drink water", "date": "2026-03-10"}


@pytest.mark.asyncio
async def test_reminder_relative_time_crosses_midnight(make_engine, task_context):
    late = datetime(2026, 3, 10, 23, 55)
    response = await make_engine().step(None, None, "remind me in 10 minutes to sleep", task_context, late)
    assert response.actions[0].params == {"time": "00:05", "message": "sleep", "date": "2026-03-11"}


@pytest.mark.asyncio
async def test_reminder_asks_when_then_reads_bare_hour(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "remind me to call mom", task_context, now, "english")
    assert first.next_step == "ask_when"
    assert first.message == english("reminder_ask_when", message="call mom")

    second = await engine.step(FlowName.REMINDER, "ask_when", "6", task_context, now, "english", first.flow_data)
    assert second.actions[0].params == {"time": "18:00", "message": "call mom", "date": "2026-03-10"}


@pytest.mark.asyncio
async def test_reminder_keeps_first_turn_date_until_done(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "remind me kal to call mom", task_context, now, "english")
    assert first.next_step == "ask_when"
    assert first.flow_data["date"] == "2026-03-11"

    # on a later day a bare hour reads as daytime
    second = await engine.step(FlowName.REMINDER, "ask_when", "6", task_context, now, "english", first.flow_data)
    assert second.actions[0].params == {"time": "06:00", "message": "call mom", "date": "2026-03-11"}


@pytest.mark.asyncio
async def test_reminder_asks_what_first(make_engine, task_context, now):
    response = await make_engine().step(None, None, "set a reminder", task_context, now, "english")
    assert response.next_step == "ask_what"


# --- check_task ---

def test_match_task_by_number_title_and_substring(task_context):
    tasks = task_context.pending_tasks
    assert match_task("2", tasks).title == "Gym"
    assert match_task("task 1", tasks).title == "Write report"
    assert match_task("gym ho gaya", tasks).title == "Gym"
    assert match_task("report done", tasks).title == "Write report"
    assert match_task("9", tasks) is None
    assert match_task("xyz", tasks) is None
    assert match_task("gym", []) is None


def test_format_task_list(task_context):
    assert format_task_list(task_context.pending_tasks) == "1. Write report\n2. Gym (06:00)"


@pytest.mark.asyncio
async def test_check_task_completes_named_task(make_engine, task_context, now):
    extractor = FakeExtractor()
    response = await make_engine(extractor=extractor).step(None, None, "gym ho gaya", task_context, now, "english")

    assert response.actions[0].type.value == "complete_task"
    assert response.actions[0].params == {"taskTitle": "Gym"}
    assert response.message == english("check_done", title="Gym")
    assert extractor.calls == []


@pytest.mark.asyncio
async def test_check_task_delete_mode(make_engine, task_context, now):
    response = await make_engine().step(None, None, "delete report", task_context, now, "english")
    assert response.actions[0].type.value == "delete_task"
    assert response.actions[0].params == {"taskTitle": "Write report"}


@pytest.mark.asyncio
async def test_check_task_no_match_lists_tasks_then_picks(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "xyz done", task_context, now, "english")
    assert first.next_step == "pick_task"
    assert first.message == english("check_no_match", query="xyz done", task_list="1. Write report\n2. Gym (06:00)")

    second = await engine.step(FlowName.CHECK_TASK, "pick_task", "2", task_context, now, "english", first.flow_data)
    assert second.actions[0].params == {"taskTitle": "Gym"}


@pytest.mark.asyncio
async def test_check_task_with_nothing_pending(make_engine, now):
    context = TaskContext(total=1, completed=1, pending=0,
                          completed_tasks=[TaskSummary(title="Gym", completed=True)])
    response = await make_engine().step(None, None, "gym done", context, now, "english")
    assert response.next_step == "done"
    assert response.actions == []
    assert response.message == english("check_all_done")


# --- plan_day ---

def test_order_tasks_uses_part_of_day_anchors(task_context):
    ordered = order_tasks(task_context.pending_tasks + [TaskSummary(title="Read")])
    assert [t.title for t in ordered] == ["Gym", "Write report", "Read"]


@pytest.mark.asyncio
async def test_plan_day_uses_smart_pool(make_engine, fake_ai, task_context, now):
    response = await make_engine().step(None, None, "plan my day", task_context, now, "english")

    assert response.next_step == "done"
    assert response.message == "1. Gym\n2. Write report\nYou got this!"
    system, user, pool = fake_ai.generate_text.await_args.args
    assert pool == "smart"
    assert "1. Gym (06:00)\n2. Write report" in user


@pytest.mark.asyncio
async def test_plan_day_falls_back_to_ordered_list(make_engine, fake_ai, task_context, now):
    fake_ai.generate_text.side_effect = ExtractionFault("down")
    response = await make_engine().step(None, None, "plan my day", task_context, now, "english")
    assert response.message == english("plan_fallback", pending=2, task_list="1. Gym (06:00)\n2. Write report")


@pytest.mark.asyncio
async def test_plan_day_without_tasks_offers_add_task(make_engine, fake_ai, empty_context, now):
    response = await make_engine().step(None, None, "plan my day", empty_context, now, "english")
    assert response.message == english("plan_no_tasks")
    assert [qa.action for qa in response.quick_actions] == ["add_task"]
    fake_ai.generate_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_plan_day_all_done(make_engine, now):
    context = TaskContext(total=2, completed=2, pending=0)
    response = await make_engine().step(FlowName.PLAN_DAY, "start", "", context, now, "english")
    assert response.message == english("plan_all_done", total=2)


# --- notes ---

@pytest.mark.parametrize("text, expected", [
    ("notes: buy milk", ("buy milk", False)),
    ("add to my notes call the bank", ("call the bank", False)),
    ("replace notes with new plan", ("new plan", True)),
    ("note", ("", False)),
    ("notebook is on the desk", ("notebook is on the desk", False)),
])
def test_split_note(text, expected):
    assert split_note(text) == expected


@pytest.mark.asyncio
async def test_notes_append_in_one_turn(make_engine, task_context, now):
    response = await make_engine().step(None, None, "notes: buy milk", task_context, now, "english")
    assert response.actions[0].params == {"content": "buy milk", "mode": "append"}
    assert response.message == english("notes_done")


@pytest.mark.asyncio
async def test_notes_replace(make_engine, task_context, now):
    response = await make_engine().step(None, None, "replace notes with new plan", task_context, now, "english")
    assert response.actions[0].params == {"content": "new plan", "mode": "replace"}
    assert response.message == english("notes_replaced")


@pytest.mark.asyncio
async def test_notes_asks_for_content_then_takes_reply_verbatim(make_engine, task_context, now):
    engine = make_engine()
    first = await engine.step(None, None, "take a note", task_context, now, "english")
    assert first.next_step == "write_note"

    second = await engine.step(
        FlowName.NOTES, "write_note", "  Remember: dentist at 5!  ", task_context, now, "english", first.flow_data
    )
    assert second.actions[0].params == {"content": "Remember: dentist at 5!", "mode": "append"}
