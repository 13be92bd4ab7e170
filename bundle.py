# bundle.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from models import BundleChange, ChanCount, DataType


@dataclass
class Channel:
    name: str
    data_type: DataType
    ports: List[str] = field(default_factory=list)


class Bundle(QObject):
    """
    A named, ordered set of channels; each channel names zero or more ports.

    Consumers subscribe to `changed`, which carries a BundleChange mask.
    """

    changed = Signal(int)

    def __init__(self, name: str = "", ports_are_inputs: bool = False, is_user: bool = False) -> None:
        super().__init__()
        self._name = name
        self._ports_are_inputs = ports_are_inputs
        self._is_user = is_user
        self._channels: List[Channel] = []

        self._signals_suspended = False
        self._pending_change = BundleChange.NONE

    def __repr__(self) -> str:
        d = "in" if self._ports_are_inputs else "out"
        return f"<Bundle {self._name!r} {d} {len(self._channels)}ch>"

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        if name == self._name:
            return
        self._name = name
        self._emit(BundleChange.NAME)

    @property
    def is_user(self) -> bool:
        return self._is_user

    def ports_are_inputs(self) -> bool:
        return self._ports_are_inputs

    def set_ports_are_inputs(self, inputs: bool) -> None:
        if inputs == self._ports_are_inputs:
            return
        self._ports_are_inputs = inputs
        self._emit(BundleChange.DIRECTION)

    def add_channel(self, name: str, data_type: DataType, port: Optional[str] = None) -> None:
        ports = [port] if port else []
        self._channels.append(Channel(name=name, data_type=data_type, ports=ports))
        self._emit(BundleChange.CONFIGURATION)

    def remove_channel(self, ch: int) -> None:
        self._check(ch)
        del self._channels[ch]
        self._emit(BundleChange.CONFIGURATION)

    def set_port(self, ch: int, port: str) -> None:
        self._check(ch)
        self._channels[ch].ports = [port]
        self._emit(BundleChange.PORTS)

    def add_port_to_channel(self, ch: int, port: str) -> None:
        self._check(ch)
        if port in self._channels[ch].ports:
            return
        self._channels[ch].ports.append(port)
        self._emit(BundleChange.PORTS)

    def remove_ports_from_channel(self, ch: int) -> None:
        self._check(ch)
        self._channels[ch].ports = []
        self._emit(BundleChange.PORTS)

    def nchannels(self) -> ChanCount:
        n = ChanCount()
        for c in self._channels:
            n = n + ChanCount.of(c.data_type, 1)
        return n

    def n_total(self) -> int:
        return len(self._channels)

    def channel_name(self, ch: int) -> str:
        self._check(ch)
        return self._channels[ch].name

    def channel_type(self, ch: int) -> DataType:
        self._check(ch)
        return self._channels[ch].data_type

    def channel_ports(self, ch: int) -> List[str]:
        self._check(ch)
        return list(self._channels[ch].ports)

    def offers_port(self, port: str) -> bool:
        return any(port in c.ports for c in self._channels)

    def offers_port_alone(self, port: str) -> bool:
        return any(c.ports == [port] for c in self._channels)

    def has_same_ports(self, other: Optional["Bundle"]) -> bool:
        """
        True when both bundles carry the same per-channel port sets, in any channel order.
        """
        if other is None:
            return False
        if other.n_total() != self.n_total():
            return False
        mine = Counter(frozenset(c.ports) for c in self._channels)
        theirs = Counter(frozenset(c.ports) for c in other._channels)
        return mine == theirs

    def suspend_signals(self) -> None:
        self._signals_suspended = True

    def resume_signals(self) -> None:
        pending = self._pending_change
        self._pending_change = BundleChange.NONE
        self._signals_suspended = False
        if pending:
            self.changed.emit(int(pending))

    def _emit(self, c: BundleChange) -> None:
        if self._signals_suspended:
            self._pending_change |= c
            return
        self.changed.emit(int(c))

    def _check(self, ch: int) -> None:
        if ch < 0 or ch >= len(self._channels):
            raise IndexError(f"Bundle {self._name!r} has no channel {ch}")
