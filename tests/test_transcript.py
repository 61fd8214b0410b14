import pytest

from poe_puppet.errors import ClearControlNotFoundError
from poe_puppet.transcript import TranscriptReader


def test_read_last_returns_tail_in_dom_order(make_transport):
    reader = TranscriptReader(make_transport(messages=["one", "two", "three", "four"]))

    assert reader.read_last(2) == ["three", "four"]
    assert reader.read_last() == ["four"]


def test_read_last_returns_everything_when_fewer_exist(make_transport):
    reader = TranscriptReader(make_transport(messages=["one", "two"]))

    assert reader.read_last(10) == ["one", "two"]


def test_read_last_is_idempotent(make_transport):
    reader = TranscriptReader(make_transport(messages=["a", "b", "c"]))

    assert reader.read_last(2) == reader.read_last(2)


def test_rows_are_trimmed_and_empty_rows_skipped(make_transport):
    reader = TranscriptReader(make_transport(messages=["  hello \n", "", "\tbye"]))

    assert reader.read_all() == ["hello", "bye"]


def test_read_last_zero_and_negative(make_transport):
    reader = TranscriptReader(make_transport(messages=["a"]))

    assert reader.read_last(0) == []
    with pytest.raises(ValueError):
        reader.read_last(-1)


def test_clear_empties_transcript(make_transport):
    transport = make_transport(messages=["a", "b", "c"])
    reader = TranscriptReader(transport)

    reader.clear()

    for k in (1, 3, 50):
        assert reader.read_last(k) == []
    assert transport.clear_button.clicks == 1


def test_clear_without_control_raises(make_transport):
    transport = make_transport(messages=["a"])
    transport.has_clear = False

    with pytest.raises(ClearControlNotFoundError) as excinfo:
        TranscriptReader(transport).clear()

    assert excinfo.value.selector == transport.selectors.clear_control
    assert transport.messages == ["a"]
