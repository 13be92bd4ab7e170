"""Shared pytest fixtures for bundlebay tests.

Builds a small but complete session: tracks, busses, a monitor bus, sends,
a plugin sidechain, I/O plugins, a control surface, transport masters and a
port registry with hardware, external, hidden and noise ports.
"""

from typing import Iterable, List

import pytest
from PySide6.QtGui import QColor

from bundle import Bundle
from models import DataType, PortFlag
from port_engine import PortRegistry
from routing import (
    IO,
    ControlSurface,
    IOPlug,
    Processor,
    ProcessorKind,
    Route,
    RouteKind,
    Session,
    TransportMaster,
)


class SignalRecorder:
    """Collects every emission of the signals it is connected to."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


def make_io(
    registry: PortRegistry,
    name: str,
    inputs: bool,
    ports: Iterable[str],
    t: DataType = DataType.AUDIO,
    flags: PortFlag = PortFlag.NONE,
) -> IO:
    io = IO(name, inputs)
    direction = PortFlag.IS_INPUT if inputs else PortFlag.IS_OUTPUT
    for p in ports:
        io.add_port(p, t)
        registry.register(p, t, direction | flags)
    return io


def make_route(
    registry: PortRegistry,
    name: str,
    kind: RouteKind,
    order: int,
    color: QColor = None,
) -> Route:
    inp = make_io(registry, name, True, [f"ardour:{name}/audio_in {i}" for i in (1, 2)])
    out = make_io(registry, name, False, [f"ardour:{name}/audio_out {i}" for i in (1, 2)])
    return Route(name=name, kind=kind, order=order, input=inp, output=out, color=color)


def hardware_bundle(name: str, inputs: bool, ports: Iterable[str], is_user: bool = False) -> Bundle:
    b = Bundle(name, inputs, is_user=is_user)
    for p in ports:
        b.add_channel(p.rpartition("_")[2], DataType.AUDIO, p)
    return b


@pytest.fixture
def recorder() -> SignalRecorder:
    return SignalRecorder()


@pytest.fixture
def registry() -> PortRegistry:
    r = PortRegistry()
    phys_out = PortFlag.IS_OUTPUT | PortFlag.IS_PHYSICAL
    phys_in = PortFlag.IS_INPUT | PortFlag.IS_PHYSICAL

    r.register("system:capture_1", DataType.AUDIO, phys_out)
    r.register("system:capture_2", DataType.AUDIO, phys_out)
    r.register("system:playback_1", DataType.AUDIO, phys_in)
    r.register("system:playback_2", DataType.AUDIO, phys_in)
    r.register("system:midi_capture_1", DataType.MIDI, phys_out)
    r.register("Midi-Through:Midi-Through Port-0 (capture)", DataType.MIDI, phys_out)

    r.register("fluidsynth:right", DataType.AUDIO, PortFlag.IS_OUTPUT)
    r.register("fluidsynth:left", DataType.AUDIO, PortFlag.IS_OUTPUT)
    r.register("zyn:out_1", DataType.AUDIO, PortFlag.IS_OUTPUT)
    r.register("pulse:monitor_FL", DataType.AUDIO, PortFlag.IS_OUTPUT | PortFlag.HIDDEN)
    return r


@pytest.fixture
def session(registry: PortRegistry) -> Session:
    audio1 = make_route(registry, "Audio 1", RouteKind.TRACK, 2, QColor("#7fd6a6"))
    audio2 = make_route(registry, "Audio 2", RouteKind.TRACK, 0)
    bus1 = make_route(registry, "Bus 1", RouteKind.BUS, 1)
    master = make_route(registry, "Master", RouteKind.MASTER, 3)
    monitor = make_route(registry, "Monitor", RouteKind.MONITOR, 4)

    send_out = make_io(registry, "send 1", False, ["ardour:send 1/audio_out 1", "ardour:send 1/audio_out 2"])
    sc_in = make_io(registry, "Sidechain", True, ["ardour:Audio 1/Sidechain/audio_in 1"])
    audio1.processors = [
        Processor("Comp", ProcessorKind.PLUGIN_INSERT, sidechain=sc_in),
        Processor("main outs", ProcessorKind.DELIVERY, output=audio1.output),
        Processor("send 1", ProcessorKind.SEND, output=send_out),
    ]

    pre = IOPlug(
        "Pre FX",
        input=make_io(registry, "Pre FX", True, ["ardour:Pre FX/in 1"]),
        output=make_io(registry, "Pre FX", False, ["ardour:Pre FX/out 1"]),
        is_pre=True,
    )
    post = IOPlug(
        "Post FX",
        input=make_io(registry, "Post FX", True, ["ardour:Post FX/in 1"]),
        output=make_io(registry, "Post FX", False, ["ardour:Post FX/out 1"]),
        is_pre=False,
    )
    empty = IOPlug("Empty", input=IO("Empty", True), output=IO("Empty", False))

    surface_out = Bundle("Generic MIDI", False)
    surface_out.add_channel("out", DataType.MIDI, "ardour:Generic MIDI out")
    surface_in = Bundle("Generic MIDI", True)
    surface_in.add_channel("in", DataType.MIDI, "ardour:Generic MIDI in")
    registry.register("ardour:Generic MIDI out", DataType.MIDI, PortFlag.IS_OUTPUT)
    registry.register("ardour:Generic MIDI in", DataType.MIDI, PortFlag.IS_INPUT)

    for p, t, f in (
        ("ardour:LTC out", DataType.AUDIO, PortFlag.IS_OUTPUT),
        ("ardour:MTC out", DataType.MIDI, PortFlag.IS_OUTPUT),
        ("ardour:MIDI Clock out", DataType.MIDI, PortFlag.IS_OUTPUT),
        ("ardour:MMC out", DataType.MIDI, PortFlag.IS_OUTPUT),
        ("ardour:MMC in", DataType.MIDI, PortFlag.IS_INPUT),
        ("ardour:LTC in", DataType.AUDIO, PortFlag.IS_INPUT),
        ("ardour:MTC in", DataType.MIDI, PortFlag.IS_INPUT),
        ("ardour:x-virtual-keyboard", DataType.MIDI, PortFlag.IS_OUTPUT),
    ):
        registry.register(p, t, f)

    return Session(
        routes=[audio1, audio2, bus1, master, monitor],
        bundles=[
            hardware_bundle("Capture 1+2", False, ["system:capture_1", "system:capture_2"]),
            hardware_bundle("Playback 1+2", True, ["system:playback_1", "system:playback_2"]),
        ],
        io_plugs=[pre, post, empty],
        control_surfaces=[ControlSurface("Generic MIDI", [surface_out, surface_in])],
        transport_masters=[
            TransportMaster("MTC", "MTC in", DataType.MIDI),
            TransportMaster("LTC", "LTC in", DataType.AUDIO),
            TransportMaster("Clock", "", DataType.MIDI),
        ],
        port_engine=registry,
        program_name="Ardour",
        auditioner=make_io(registry, "Auditioner", False, ["ardour:Auditioner/audio_out 1"]),
        click_io=make_io(registry, "Click", False, ["ardour:Click/out 1", "ardour:Click/out 2"]),
        ltc_output_port="LTC out",
        mtc_output_port="MTC out",
        midi_clock_output_port="MIDI Clock out",
        mmc_output_port="MMC out",
        mmc_input_port="MMC in",
        vkbd_output_port="x-virtual-keyboard",
    )
