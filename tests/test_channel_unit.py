import threading

import pytest

from util.channel import Channel


def test_fifo_then_closed():
    channel = Channel(4)
    assert channel.send("a") and channel.send("b")
    channel.close()
    assert channel.receive() == ("a", True)
    assert channel.receive() == ("b", True)
    assert channel.receive() == (None, False)
    assert channel.closed


def test_send_after_close_is_refused():
    channel = Channel(1)
    channel.close()
    assert channel.send("x") is False
    assert channel.try_send("x") is False


def test_try_send_drops_when_full():
    channel = Channel(1)
    assert channel.try_send(1)
    assert not channel.try_send(2)
    assert len(channel) == 1


def test_receive_timeout():
    assert Channel(1).receive(timeout=0.01) == (None, True)


def test_blocked_send_gives_up_on_cancel():
    channel = Channel(1)
    channel.send("first")
    cancel = threading.Event()
    cancel.set()
    assert channel.send("second", cancel) is False
    assert len(channel) == 1


def test_blocked_send_resumes_when_reader_drains():
    channel = Channel(1)
    channel.send(1)
    results = []
    sender = threading.Thread(target=lambda: results.append(channel.send(2)))
    sender.start()
    assert channel.receive() == (1, True)
    sender.join(timeout=2)
    assert results == [True]
    assert channel.receive() == (2, True)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        Channel(0)
