# models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag


class DataType(Enum):
    NIL = "nil"
    AUDIO = "audio"
    MIDI = "midi"

    @classmethod
    def real_types(cls) -> tuple["DataType", ...]:
        return (cls.AUDIO, cls.MIDI)

    @classmethod
    def from_string(cls, v: str) -> "DataType":
        s = (v or "").strip().lower()
        if s in ("", "all", "nil", "any"):
            return cls.NIL
        for t in cls:
            if t.value == s:
                return t
        raise ValueError(f"Unknown data type: {v!r}")


# Port flags, numbered the way JACK/Ardour number them.
class PortFlag(IntFlag):
    NONE = 0
    IS_INPUT = 0x01
    IS_OUTPUT = 0x02
    IS_PHYSICAL = 0x04
    CAN_MONITOR = 0x08
    IS_TERMINAL = 0x10
    HIDDEN = 0x20


class BundleChange(IntFlag):
    NONE = 0
    NAME = 0x1
    CONFIGURATION = 0x2
    PORTS = 0x4
    TYPE = 0x8
    DIRECTION = 0x10


@dataclass(frozen=True)
class ChanCount:
    audio: int = 0
    midi: int = 0

    @classmethod
    def of(cls, t: DataType, n: int) -> "ChanCount":
        if t is DataType.AUDIO:
            return cls(audio=n)
        if t is DataType.MIDI:
            return cls(midi=n)
        return cls()

    def get(self, t: DataType) -> int:
        if t is DataType.AUDIO:
            return self.audio
        if t is DataType.MIDI:
            return self.midi
        return self.n_total()

    def n_total(self) -> int:
        return self.audio + self.midi

    def __add__(self, other: "ChanCount") -> "ChanCount":
        return ChanCount(self.audio + other.audio, self.midi + other.midi)

    def __ge__(self, other: "ChanCount") -> bool:
        return self.audio >= other.audio and self.midi >= other.midi

    def __gt__(self, other: "ChanCount") -> bool:
        # partial order: larger in at least one type, smaller in none
        return self >= other and self != other

    def __le__(self, other: "ChanCount") -> bool:
        return other >= self

    def __lt__(self, other: "ChanCount") -> bool:
        return other > self


@dataclass(frozen=True)
class PortInfo:
    name: str
    data_type: DataType
    flags: PortFlag
    pretty_name: str = ""
