from milighthub.bulb_id import BulbId
from milighthub.field_transition import FieldTransition, FieldTransitionBuilder
from milighthub.group_state_field import GroupStateField
from milighthub.remote_type import RemoteType

BULB = BulbId(0x1234, 1, RemoteType.RGBW)


def _recorder():
    calls = []

    def callback(bulb, field, value):
        calls.append((bulb, field, value))

    return calls, callback


def _run(transition, limit=1000):
    for _ in range(limit):
        if transition.is_finished():
            break
        transition.step()
    return transition


def _builder(start, end, callback):
    builder = FieldTransitionBuilder(3, 500, BULB, callback, GroupStateField.LEVEL, start, end)
    builder.set_duration_raw(1000)
    builder.set_period(100)
    return builder


def test_increasing_transition_reaches_end():
    calls, callback = _recorder()
    transition = _run(_builder(0, 100, callback).build())
    values = [value for _, _, value in calls]
    assert transition.is_finished()
    assert values[0] == 0
    assert values[-1] == 100
    assert all(a < b for a, b in zip(values, values[1:]))
    assert all(bulb == BULB and field == GroupStateField.LEVEL for bulb, field, _ in calls)


def test_decreasing_transition_reaches_end():
    calls, callback = _recorder()
    transition = _run(_builder(80, 5, callback).build())
    values = [value for _, _, value in calls]
    assert transition.is_finished()
    assert values[0] == 80
    assert values[-1] == 5
    assert all(a > b for a, b in zip(values, values[1:]))


def test_small_distance_steps_by_one():
    _, callback = _recorder()
    builder = FieldTransitionBuilder(1, 500, BULB, callback, GroupStateField.LEVEL, 0, 2)
    builder.set_duration_raw(10000)
    builder.set_period(150)
    assert builder.build().child_serialize()["step_size"] == 1


def test_small_distance_downwards_steps_by_minus_one():
    _, callback = _recorder()
    builder = FieldTransitionBuilder(1, 500, BULB, callback, GroupStateField.LEVEL, 2, 0)
    builder.set_duration_raw(10000)
    builder.set_period(150)
    assert builder.build().child_serialize()["step_size"] == -1


def test_max_steps_is_distance():
    _, callback = _recorder()
    builder = FieldTransitionBuilder(1, 500, BULB, callback, GroupStateField.LEVEL, 10, 50)
    assert builder.max_steps == 40


def test_max_steps_at_least_one():
    _, callback = _recorder()
    builder = FieldTransitionBuilder(1, 500, BULB, callback, GroupStateField.LEVEL, 30, 30)
    assert builder.max_steps == 1


def test_equal_start_and_end_finishes_after_one_send():
    calls, callback = _recorder()
    transition = FieldTransition(1, BULB, GroupStateField.HUE, 30, 30, 1, 100, callback)
    transition.step()
    assert transition.is_finished()
    assert calls == [(BULB, GroupStateField.HUE, 30)]


def test_child_serialize():
    _, callback = _recorder()
    transition = FieldTransition(1, BULB, GroupStateField.BRIGHTNESS, 10, 90, 5, 100, callback)
    data = transition.child_serialize()
    assert data == {
        "type": "field",
        "field": "brightness",
        "current_value": 10,
        "end_value": 90,
        "step_size": 5,
    }


def test_serialize_uses_builder_id_and_period():
    _, callback = _recorder()
    transition = _builder(0, 100, callback).build()
    data = transition.serialize()
    assert data["id"] == 3
    assert data["period"] == 100
    assert data["bulb"] == BULB.to_dict()