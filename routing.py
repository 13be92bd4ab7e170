# routing.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from PySide6.QtGui import QColor

from app_meta import PROGRAM_NAME
from bundle import Bundle
from models import ChanCount, DataType
from port_engine import PortEngine, PortRegistry


class IO:
    """
    A set of ports owned by a route or processor, exposed as one bundle.
    """

    def __init__(self, name: str, inputs: bool, ports: Sequence[Tuple[str, DataType]] = ()) -> None:
        self.name = name
        self._inputs = inputs
        self._bundle = Bundle(name, inputs)
        for port_name, t in ports:
            self.add_port(port_name, t)

    def __repr__(self) -> str:
        d = "in" if self._inputs else "out"
        return f"<IO {self.name!r} {d} {self._bundle.n_total()}p>"

    def bundle(self) -> Bundle:
        return self._bundle

    def add_port(self, port_name: str, t: DataType, label: str = "") -> None:
        self._bundle.add_channel(label or port_name.rpartition(":")[2], t, port_name)

    def n_ports(self) -> ChanCount:
        return self._bundle.nchannels()


class RouteKind(Enum):
    TRACK = "track"
    BUS = "bus"
    MASTER = "master"
    MONITOR = "monitor"


class ProcessorKind(Enum):
    PLUGIN_INSERT = "plugin"
    DELIVERY = "delivery"
    SEND = "send"
    RETURN = "return"
    PORT_INSERT = "port-insert"
    AMP = "amp"
    METER = "meter"


# kinds that own input/output IO objects
IO_PROCESSOR_KINDS = (
    ProcessorKind.DELIVERY,
    ProcessorKind.SEND,
    ProcessorKind.RETURN,
    ProcessorKind.PORT_INSERT,
)


@dataclass(eq=False)
class Processor:
    name: str
    kind: ProcessorKind
    input: Optional[IO] = None
    output: Optional[IO] = None
    sidechain: Optional[IO] = None

    def owns_io(self) -> bool:
        return self.kind in IO_PROCESSOR_KINDS

    def io(self, inputs: bool) -> Optional[IO]:
        if not self.owns_io():
            return None
        return self.input if inputs else self.output


@dataclass(eq=False)
class Route:
    name: str
    kind: RouteKind
    order: int
    input: IO
    output: IO
    processors: List[Processor] = field(default_factory=list)
    color: Optional[QColor] = None

    def is_track(self) -> bool:
        return self.kind is RouteKind.TRACK

    def is_monitor(self) -> bool:
        return self.kind is RouteKind.MONITOR

    def io(self, inputs: bool) -> IO:
        return self.input if inputs else self.output

    def nth_plugin(self, n: int) -> Optional[Processor]:
        plugins = [p for p in self.processors if p.kind is ProcessorKind.PLUGIN_INSERT]
        if 0 <= n < len(plugins):
            return plugins[n]
        return None


@dataclass(eq=False)
class IOPlug:
    name: str
    input: IO
    output: IO
    is_pre: bool = True

    def io(self, inputs: bool) -> IO:
        return self.input if inputs else self.output


@dataclass(frozen=True)
class TransportMaster:
    name: str
    port: str           # relative or full port name, "" when the master has none
    data_type: DataType


@dataclass(eq=False)
class ControlSurface:
    name: str
    surface_bundles: List[Bundle] = field(default_factory=list)

    def bundles(self) -> List[Bundle]:
        return list(self.surface_bundles)


@dataclass(eq=False)
class Session:
    """
    Everything the classifier reads from the host: routes, session bundles,
    I/O plugins, control surfaces, transport masters and the port engine.
    """

    routes: List[Route] = field(default_factory=list)
    bundles: List[Bundle] = field(default_factory=list)
    io_plugs: List[IOPlug] = field(default_factory=list)
    control_surfaces: List[ControlSurface] = field(default_factory=list)
    transport_masters: List[TransportMaster] = field(default_factory=list)
    port_engine: PortEngine = field(default_factory=PortRegistry)
    program_name: str = PROGRAM_NAME

    auditioner: Optional[IO] = None
    click_io: Optional[IO] = None
    ltc_output_port: str = ""
    mtc_output_port: str = ""
    midi_clock_output_port: str = ""
    mmc_output_port: str = ""
    mmc_input_port: str = ""
    vkbd_output_port: str = ""

    @property
    def client_name(self) -> str:
        return self.program_name.lower()

    def make_port_name_non_relative(self, name: str) -> str:
        if not name or ":" in name:
            return name
        return f"{self.client_name}:{name}"

    def color_for(self, route: Route) -> Optional[QColor]:
        c = route.color
        if c is None or not c.isValid():
            return None
        return c
