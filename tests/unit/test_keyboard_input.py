"""Unit tests for terminal key mapping."""

import pytest
from unittest.mock import Mock

from voicerelay.models.events import SPACE
from voicerelay.ui.keyboard_input import PushToTalkKeyMapper, KeyboardInputHandler


@pytest.mark.unit
class TestPushToTalkKeyMapper:

    def test_space_publishes_toggle_press(self):
        publish = Mock()
        mapper = PushToTalkKeyMapper(publish)

        assert mapper(" ") is True

        event = publish.call_args.args[0]
        assert event.key == SPACE
        assert event.toggle is True

    def test_repeated_space_publishes_one_toggle_each(self):
        publish = Mock()
        mapper = PushToTalkKeyMapper(publish)

        mapper(" ")
        mapper(" ")

        assert publish.call_count == 2
        assert all(c.args[0].toggle for c in publish.call_args_list)

    def test_quit_key_stops_input(self):
        publish = Mock()
        on_quit = Mock()
        mapper = PushToTalkKeyMapper(publish, on_quit=on_quit)

        assert mapper("q") is False

        on_quit.assert_called_once()
        publish.assert_not_called()

    def test_other_keys_ignored(self):
        publish = Mock()
        mapper = PushToTalkKeyMapper(publish)

        assert mapper("x") is True
        publish.assert_not_called()


@pytest.mark.unit
def test_input_loop_ends_when_callback_returns_false():
    keys = iter(["a", None, "q"])
    seen = []

    def callback(key):
        seen.append(key)
        return key != "q"

    handler = KeyboardInputHandler(callback)
    handler._get_key = lambda: next(keys)
    handler.running = True
    handler._input_loop()

    assert seen == ["a", "q"]
    assert handler.running is False
