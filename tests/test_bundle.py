"""Unit tests for Bundle."""

import pytest

from bundle import Bundle
from models import BundleChange, ChanCount, DataType


def stereo(name: str, left: str, right: str, inputs: bool = False) -> Bundle:
    b = Bundle(name, inputs)
    b.add_channel("L", DataType.AUDIO, left)
    b.add_channel("R", DataType.AUDIO, right)
    return b


class TestChannels:
    """Tests for channel bookkeeping."""

    def test_nchannels_by_type(self):
        """Channel counts are kept per data type."""
        b = stereo("s", "a:1", "a:2")
        b.add_channel("midi", DataType.MIDI, "a:midi")
        assert b.nchannels() == ChanCount(audio=2, midi=1)
        assert b.n_total() == 3
        assert b.channel_type(2) is DataType.MIDI

    def test_channel_without_port(self):
        """A channel may be created empty and bound later."""
        b = Bundle("x")
        b.add_channel("one", DataType.AUDIO)
        assert b.channel_ports(0) == []
        b.set_port(0, "x:1")
        assert b.channel_ports(0) == ["x:1"]

    def test_channel_ports_is_a_copy(self):
        """Mutating the returned list does not touch the bundle."""
        b = stereo("s", "a:1", "a:2")
        b.channel_ports(0).append("zzz")
        assert b.channel_ports(0) == ["a:1"]

    def test_bad_index(self):
        """Out-of-range channels are caller bugs."""
        b = Bundle("x")
        with pytest.raises(IndexError):
            b.channel_ports(0)
        with pytest.raises(IndexError):
            b.set_port(-1, "x:1")


class TestPortQueries:
    """Tests for port membership and structural equality."""

    def test_offers_port_alone(self):
        """Only a channel holding exactly that port counts."""
        b = Bundle("x")
        b.add_channel("one", DataType.AUDIO, "x:1")
        b.add_channel("two", DataType.AUDIO, "x:2")
        b.add_port_to_channel(1, "x:3")
        assert b.offers_port_alone("x:1")
        assert not b.offers_port_alone("x:2")
        assert b.offers_port("x:3")
        assert not b.offers_port("x:4")

    def test_same_ports_any_order(self):
        """Channel order does not matter for equality."""
        a = stereo("a", "p:1", "p:2")
        b = stereo("b", "p:2", "p:1")
        assert a.has_same_ports(b)
        assert b.has_same_ports(a)

    def test_different_ports(self):
        a = stereo("a", "p:1", "p:2")
        b = stereo("b", "p:1", "p:3")
        assert not a.has_same_ports(b)
        assert not a.has_same_ports(None)

    def test_different_channel_count(self):
        a = stereo("a", "p:1", "p:2")
        b = Bundle("b")
        b.add_channel("both", DataType.AUDIO, "p:1")
        b.add_port_to_channel(0, "p:2")
        assert not a.has_same_ports(b)


class TestChangeSignal:
    """Tests for change notification."""

    def test_name_change(self, recorder):
        """Renaming emits NAME once; renaming to the same name is silent."""
        b = Bundle("x")
        b.changed.connect(recorder)
        b.set_name("y")
        b.set_name("y")
        assert recorder.calls == [(int(BundleChange.NAME),)]

    def test_port_change(self, recorder):
        b = stereo("s", "a:1", "a:2")
        b.changed.connect(recorder)
        b.set_port(0, "a:3")
        assert recorder.calls == [(int(BundleChange.PORTS),)]

    def test_direction_change(self, recorder):
        b = Bundle("x", False)
        b.changed.connect(recorder)
        b.set_ports_are_inputs(True)
        assert b.ports_are_inputs()
        assert recorder.calls == [(int(BundleChange.DIRECTION),)]

    def test_suspend_coalesces(self, recorder):
        """While suspended, changes merge into one emission on resume."""
        b = Bundle("x")
        b.changed.connect(recorder)
        b.suspend_signals()
        b.set_name("y")
        b.add_channel("c", DataType.AUDIO, "x:1")
        assert recorder.count == 0
        b.resume_signals()
        assert recorder.calls == [(int(BundleChange.NAME | BundleChange.CONFIGURATION),)]

    def test_resume_without_changes_is_silent(self, recorder):
        b = Bundle("x")
        b.changed.connect(recorder)
        b.suspend_signals()
        b.resume_signals()
        assert recorder.count == 0

    def test_remove_channel(self, recorder):
        """Dropping a channel is a configuration change."""
        b = stereo("s", "a:1", "a:2")
        b.changed.connect(recorder)
        b.remove_channel(0)
        assert b.n_total() == 1
        assert b.channel_ports(0) == ["a:2"]
        assert recorder.calls == [(int(BundleChange.CONFIGURATION),)]
        with pytest.raises(IndexError):
            b.remove_channel(1)

    def test_port_edits(self, recorder):
        """Adding and clearing ports are port changes; re-adding a held port is silent."""
        b = stereo("s", "a:1", "a:2")
        b.changed.connect(recorder)
        b.add_port_to_channel(0, "a:3")
        b.add_port_to_channel(0, "a:3")
        b.remove_ports_from_channel(1)
        assert b.channel_ports(0) == ["a:1", "a:3"]
        assert b.channel_ports(1) == []
        assert recorder.calls == [(int(BundleChange.PORTS),), (int(BundleChange.PORTS),)]

    def test_suspend_coalesces_every_mutator(self, recorder):
        b = stereo("s", "a:1", "a:2")
        b.changed.connect(recorder)
        b.suspend_signals()
        b.remove_channel(1)
        b.remove_ports_from_channel(0)
        b.add_port_to_channel(0, "a:9")
        b.set_ports_are_inputs(True)
        assert recorder.count == 0
        b.resume_signals()
        mask = BundleChange.CONFIGURATION | BundleChange.PORTS | BundleChange.DIRECTION
        assert recorder.calls == [(int(mask),)]


class TestChanCount:
    """Tests for the partial order on channel counts."""

    def test_strictly_greater(self):
        assert ChanCount(3, 0) > ChanCount(2, 0)
        assert ChanCount(2, 1) > ChanCount(2, 0)
        assert not ChanCount(2, 0) > ChanCount(2, 0)

    def test_incomparable(self):
        """More audio but less MIDI is not greater."""
        assert not ChanCount(2, 0) > ChanCount(0, 1)
        assert not ChanCount(0, 1) > ChanCount(2, 0)

    def test_get_nil_is_total(self):
        assert ChanCount(2, 1).get(DataType.NIL) == 3
        assert ChanCount(2, 1).get(DataType.MIDI) == 1
