"""
Test Scene Controller - Navigation state machine
"""

import sys
import os
from unittest.mock import Mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from carsales_story.orchestration.controller import SceneController


def test_initial_scene_is_zero():
    assert SceneController().index == 0


def test_next_stops_at_last_scene():
    controller = SceneController()

    assert controller.next() == 1
    assert controller.next() == 2
    assert controller.next() == 2
    assert controller.index == 2


def test_prev_stops_at_first_scene():
    controller = SceneController()

    assert controller.prev() == 0
    controller.select(2)
    assert controller.prev() == 1
    assert controller.prev() == 0
    assert controller.prev() == 0


@pytest.mark.parametrize("start", [0, 1, 2])
def test_select_one_from_any_state(start):
    controller = SceneController()
    controller.select(start)

    assert controller.select(1) == 1
    assert controller.index == 1


@pytest.mark.parametrize("bad_index", [-1, 3, "1", 1.0, True, None])
def test_select_rejects_invalid_index(bad_index):
    on_change = Mock()
    controller = SceneController(on_change=on_change)
    controller.select(2)
    on_change.reset_mock()

    with pytest.raises(ValueError):
        controller.select(bad_index)

    assert controller.index == 2
    on_change.assert_not_called()


def test_every_transition_triggers_on_change():
    """Clamped moves still re-render the current scene"""
    on_change = Mock()
    controller = SceneController(on_change=on_change)

    controller.prev()
    controller.next()
    controller.select(2)
    controller.next()

    assert [c.args[0] for c in on_change.call_args_list] == [0, 1, 2, 2]


def test_scene_count_must_be_positive():
    with pytest.raises(ValueError):
        SceneController(scene_count=0)

    single = SceneController(scene_count=1)
    assert single.next() == 0
    assert single.prev() == 0


def test_failed_rerender_keeps_previous_scene():
    on_change = Mock(side_effect=[None, RuntimeError("draw failed"), None])
    controller = SceneController(on_change=on_change)

    controller.next()
    with pytest.raises(RuntimeError, match="draw failed"):
        controller.next()

    assert controller.index == 1
    assert controller.select(2) == 2
    assert controller.index == 2
