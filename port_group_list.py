# port_group_list.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Generator, Iterator, List, Optional, Sequence, Tuple

from PySide6.QtCore import QMetaObject, QObject, Signal

from bundle import Bundle
from models import BundleChange, ChanCount, DataType, PortFlag
from port_group import BundleRecord, PortGroup
from port_names import (
    bundle_name_for,
    channel_label,
    common_prefix,
    naturally_sorted,
    port_has_prefix,
    split_port_runs,
)
from routing import IO, Route, Session

if TYPE_CHECKING:
    from store_config import GatherOptions


logger = logging.getLogger(__name__)

BUSSES = "Busses"
TRACKS = "Tracks"
SIDECHAINS = "Sidechains"
IO_PRE = "I/O Pre"
IO_POST = "I/O Post"
HARDWARE = "Hardware"
EXTERNAL = "External"

MIDI_THROUGH_MARKERS = ("Midi-Through", "Midi Through")
MONITOR_MARKER = "monitor"


@dataclass
class RouteIOs:
    route: Route
    ios: List[IO] = field(default_factory=list)


def _admits(t: DataType, want: DataType) -> bool:
    return t is DataType.NIL or t is want


class PortGroupList(QObject):
    """
    The classified view of every port in a session, for one direction and one
    data type filter. `gather()` rebuilds it from scratch.
    """

    changed = Signal()
    bundle_changed = Signal(int)

    def __init__(self) -> None:
        super().__init__()
        self._groups: List[PortGroup] = []
        self._group_conns: Dict[int, Tuple[QMetaObject.Connection, QMetaObject.Connection]] = {}
        self._signals_suspended = False
        self._pending_change = False
        self._pending_bundle_change = BundleChange.NONE

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[PortGroup]:
        return iter(list(self._groups))

    def groups(self) -> List[PortGroup]:
        return list(self._groups)

    def group(self, name: str) -> Optional[PortGroup]:
        for g in self._groups:
            if g.name == name:
                return g
        return None

    def empty(self) -> bool:
        return not self._groups

    # -- gathering --

    def gather_with(self, session: Optional[Session], options: "GatherOptions", inputs: bool) -> None:
        self.gather(
            session,
            options.data_type,
            inputs,
            allow_dups=options.allow_duplicates,
            use_session_bundles=options.use_session_bundles,
        )

    def gather(
        self,
        session: Optional[Session],
        data_type: DataType = DataType.NIL,
        inputs: bool = False,
        allow_dups: bool = False,
        use_session_bundles: bool = True,
    ) -> None:
        """
        Classify every port the session knows about into named groups.

        `use_session_bundles` adds the session's non-user bundles, which pair
        hardware ports into stereo bundles; without them hardware IO shows up
        port by port.
        """
        with self.batched():
            self.clear()
            if session is None:
                return
            self._gather(session, data_type, inputs, allow_dups, use_session_bundles)

    def _gather(
        self,
        session: Session,
        data_type: DataType,
        inputs: bool,
        allow_dups: bool,
        use_session_bundles: bool,
    ) -> None:
        program_name = session.program_name

        bus = PortGroup(BUSSES)
        track = PortGroup(TRACKS)
        sidechain = PortGroup(SIDECHAINS)
        iop_pre = PortGroup(IO_PRE)
        iop_post = PortGroup(IO_POST)
        system = PortGroup(HARDWARE)
        program = PortGroup(f"{program_name} Misc")
        other = PortGroup(EXTERNAL)

        for rio in self._route_ios(session, inputs):
            r = rio.route
            color = session.color_for(r)
            g = track if r.is_track() else bus

            for io in rio.ios:
                # only if at least one port has a type that was asked for
                if data_type is DataType.NIL or io.bundle().nchannels().get(data_type) > 0:
                    g.add_bundle(io.bundle(), io, color)

            if inputs:
                n = 0
                while True:
                    p = r.nth_plugin(n)
                    if p is None:
                        break
                    n += 1
                    if p.sidechain is not None:
                        sidechain.add_bundle(p.sidechain.bundle(), p.sidechain, color)

        # user bundles first, so they win over an identical session bundle
        for b in session.bundles:
            if b.is_user and b.ports_are_inputs() == inputs:
                system.add_bundle(b, allow_dups=allow_dups)

        if use_session_bundles:
            for b in session.bundles:
                if not b.is_user and b.ports_are_inputs() == inputs:
                    system.add_bundle(b, allow_dups=allow_dups)

        if _admits(data_type, DataType.AUDIO):
            for b in self._audio_program_bundles(session, inputs):
                program.add_bundle(b)

        if _admits(data_type, DataType.MIDI):
            for cs in session.control_surfaces:
                for b in cs.bundles():
                    if b.ports_are_inputs() == inputs:
                        program.add_bundle(b)

            if not inputs:
                vk = self._vkbd_bundle(session)
                if vk is not None:
                    program.add_bundle(vk)

            sync = self._midi_sync_bundle(session, inputs)
            if sync is not None:
                program.add_bundle(sync)

        for iop in session.io_plugs:
            io = iop.io(inputs)
            n = io.n_ports()
            if n.n_total() == 0:
                continue
            if data_type is DataType.NIL or n.get(data_type) > 0:
                (iop_pre if iop.is_pre else iop_post).add_bundle(io.bundle(), io)

        self._gather_leftovers(
            session,
            data_type,
            inputs,
            allow_dups,
            (bus, track, sidechain, iop_pre, iop_post, system, program, other),
            system,
            program,
            other,
        )

        if not allow_dups:
            system.remove_duplicates()

        for g in (bus, track, sidechain, iop_pre, iop_post, program, other, system):
            self.add_group_if_not_empty(g)

        logger.debug(
            "gathered %s %s: %s",
            "inputs" if inputs else "outputs",
            data_type.value,
            ", ".join(f"{g.name}={len(g)}" for g in self._groups) or "nothing",
        )

        self.emit_changed()

    def _route_ios(self, session: Session, inputs: bool) -> List[RouteIOs]:
        out: List[RouteIOs] = []
        for r in session.routes:
            # monitor bus inputs are never shown
            if inputs and r.is_monitor():
                continue

            io = r.io(inputs)
            rio = RouteIOs(route=r, ios=[io])
            # the main outs delivery shares the route's output IO; take it once
            used = {id(io)}
            for p in r.processors:
                pio = p.io(inputs)
                if pio is None or id(pio) in used:
                    continue
                rio.ios.append(pio)
                used.add(id(pio))
            out.append(rio)

        out.sort(key=lambda x: x.route.order)
        return out

    def _audio_program_bundles(self, session: Session, inputs: bool) -> List[Bundle]:
        out: List[Bundle] = []
        if not inputs:
            if session.auditioner is not None:
                out.append(session.auditioner.bundle())
            if session.click_io is not None:
                out.append(session.click_io.bundle())
            if session.ltc_output_port:
                ltc = Bundle("LTC Out", inputs)
                ltc.add_channel("LTC Out", DataType.AUDIO, session.make_port_name_non_relative(session.ltc_output_port))
                out.append(ltc)
            return out

        sync = Bundle("Sync", inputs)
        for tm in session.transport_masters:
            if not tm.port or tm.data_type is not DataType.AUDIO:
                continue
            sync.add_channel(tm.name, DataType.AUDIO, session.make_port_name_non_relative(tm.port))
        if sync.n_total():
            out.append(sync)
        return out

    def _vkbd_bundle(self, session: Session) -> Optional[Bundle]:
        if not session.vkbd_output_port:
            return None
        full = session.make_port_name_non_relative(session.vkbd_output_port)
        label = session.port_engine.get_pretty_name_by_name(full) or "Virtual Keyboard"
        vk = Bundle(label, False)
        vk.add_channel(label, DataType.MIDI, full)
        return vk

    def _midi_sync_bundle(self, session: Session, inputs: bool) -> Optional[Bundle]:
        sync = Bundle("Sync", inputs)

        def add(label: str, port: str) -> None:
            if port:
                sync.add_channel(label, DataType.MIDI, session.make_port_name_non_relative(port))

        if inputs:
            for tm in session.transport_masters:
                if tm.data_type is DataType.MIDI:
                    add(tm.name, tm.port)
            add("MMC in", session.mmc_input_port)
        else:
            add("MTC out", session.mtc_output_port)
            add("MIDI clock out", session.midi_clock_output_port)
            add("MMC out", session.mmc_output_port)

        return sync if sync.n_total() else None

    def _gather_leftovers(
        self,
        session: Session,
        data_type: DataType,
        inputs: bool,
        allow_dups: bool,
        all_groups: Sequence[PortGroup],
        system: PortGroup,
        program: PortGroup,
        other: PortGroup,
    ) -> None:
        engine = session.port_engine
        lpn = session.program_name.lower()
        lpnc = f"{lpn}:"

        extra_system: Dict[DataType, List[str]] = {t: [] for t in DataType.real_types()}
        extra_program: Dict[DataType, List[str]] = {t: [] for t in DataType.real_types()}
        extra_other: Dict[DataType, List[str]] = {t: [] for t in DataType.real_types()}

        if data_type is DataType.NIL:
            ports = engine.get_ports(DataType.AUDIO, inputs) + engine.get_ports(DataType.MIDI, inputs)
        else:
            ports = engine.get_ports(data_type, inputs)

        for p in naturally_sorted(ports):
            if not allow_dups and any(g.has_port(p) for g in all_groups):
                continue

            # useless for connections, and they confuse default routing
            if any(m in p for m in MIDI_THROUGH_MARKERS):
                continue

            # our own monitor inputs, excluded with the monitor route above
            lp = p.lower()
            if MONITOR_MARKER in lp and lpn in lp:
                continue

            ph = engine.get_port_by_name(p)
            if ph is None:
                continue

            t = engine.port_data_type(ph)
            if t is DataType.NIL:
                logger.debug("skipping port %s: unknown type", p)
                continue

            flags = engine.get_port_flags(ph)
            if flags & PortFlag.HIDDEN:
                continue
            if port_has_prefix(p, lpnc):
                extra_program[t].append(p)
            elif flags & PortFlag.IS_PHYSICAL:
                extra_system[t].append(p)
            else:
                extra_other[t].append(p)

        for t in DataType.real_types():
            if extra_system[t]:
                self._add_bundles_for_ports(session, extra_system[t], t, inputs, allow_dups, system)

        for t in DataType.real_types():
            if extra_program[t]:
                program.add_bundle(make_bundle_from_ports(session, extra_program[t], t, inputs, lpn))

        for t in DataType.real_types():
            if extra_other[t]:
                self._add_bundles_for_ports(session, extra_other[t], t, inputs, allow_dups, other)

    def _add_bundles_for_ports(
        self,
        session: Session,
        ports: Sequence[str],
        t: DataType,
        inputs: bool,
        allow_dups: bool,
        group: PortGroup,
    ) -> None:
        for run in split_port_runs(ports):
            group.add_bundle(make_bundle_from_ports(session, run, t, inputs), allow_dups=allow_dups)

    # -- container --

    def clear(self) -> None:
        for g in self._groups:
            for conn in self._group_conns.pop(id(g), ()):
                QObject.disconnect(conn)
            g.clear()
        self._groups.clear()
        self.emit_changed()

    def bundles(self) -> List[BundleRecord]:
        out: List[BundleRecord] = []
        for g in self._groups:
            out.extend(g.bundles())
        return out

    def total_channels(self) -> ChanCount:
        n = ChanCount()
        for g in self._groups:
            n = n + g.total_channels()
        return n

    def add_group_if_not_empty(self, g: PortGroup) -> None:
        if len(g):
            self.add_group(g)

    def add_group(self, g: PortGroup) -> None:
        self._groups.append(g)
        self._group_conns[id(g)] = (
            g.changed.connect(self.emit_changed),
            g.bundle_changed.connect(self.emit_bundle_changed),
        )
        self.emit_changed()

    def remove_bundle(self, bundle: Bundle) -> None:
        with self.batched():
            for g in self._groups:
                g.remove_bundle(bundle)
            self.emit_changed()

    def io_from_bundle(self, bundle: Bundle) -> Optional[IO]:
        for g in self._groups:
            io = g.io_from_bundle(bundle)
            if io is not None:
                return io
        return None

    # -- notification --

    def emit_changed(self) -> None:
        if self._signals_suspended:
            self._pending_change = True
        else:
            self.changed.emit()

    def emit_bundle_changed(self, change: int) -> None:
        if self._signals_suspended:
            self._pending_bundle_change = BundleChange(change)
        else:
            self.bundle_changed.emit(change)

    def suspend_signals(self) -> None:
        self._signals_suspended = True

    def resume_signals(self) -> None:
        if self._pending_change:
            self._pending_change = False
            self.changed.emit()

        if self._pending_bundle_change:
            c = self._pending_bundle_change
            self._pending_bundle_change = BundleChange.NONE
            self.bundle_changed.emit(int(c))

        self._signals_suspended = False

    def signals_suspended(self) -> bool:
        return self._signals_suspended

    @contextmanager
    def batched(self) -> Generator[None, None, None]:
        """
        Coalesce notifications for the duration of the block. Nested inside an
        outer suspension, pending events stay buffered for the outer resume.
        """
        was_suspended = self._signals_suspended
        self.suspend_signals()
        try:
            yield
        finally:
            if not was_suspended:
                self.resume_signals()


def make_bundle_from_ports(
    session: Session,
    ports: Sequence[str],
    t: DataType,
    inputs: bool,
    bundle_name: str = "",
) -> Bundle:
    """
    Build a synthetic bundle with one channel per port. Without an explicit
    name the bundle is named after the ports' common prefix.
    """
    engine = session.port_engine
    pre = common_prefix(ports)

    b = Bundle(bundle_name or bundle_name_for(ports), inputs)
    for j, p in enumerate(ports):
        label = engine.get_pretty_name_by_name(p) or channel_label(p, pre)
        b.add_channel(label, t)
        b.set_port(j, p)

    return b
