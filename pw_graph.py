# pw_graph.py
from __future__ import annotations

from typing import List

from models import DataType, PortFlag
from pw_channels import channel_label
from pw_types import PwGraph, PwNode, PwPort


def is_monitor_node(n: PwNode) -> bool:
    return n.name.endswith(".monitor") or n.props.get("node.name", "").endswith(".monitor")


def is_internal_node(n: PwNode) -> bool:
    app = (n.props.get("application.name") or "").strip()
    return app in ("PipeWire", "WirePlumber", "PulseAudio")


def is_device_node(n: PwNode) -> bool:
    return bool(n.props.get("device.id")) or n.media_class in ("Audio/Sink", "Audio/Source", "Midi/Bridge")


def select_ports(graph: PwGraph, data_type: DataType, direction: str) -> List[PwPort]:
    out: List[PwPort] = []
    for p in sorted(graph.ports.values(), key=lambda x: x.id):
        if p.direction != direction or not p.full_name:
            continue
        if data_type is not DataType.NIL and p.data_type is not data_type:
            continue
        out.append(p)
    return out


def port_flags(graph: PwGraph, p: PwPort) -> PortFlag:
    f = PortFlag.IS_INPUT if p.direction == "in" else PortFlag.IS_OUTPUT

    n = graph.nodes.get(p.node_id)
    if p.physical:
        f |= PortFlag.IS_PHYSICAL
    if p.terminal:
        f |= PortFlag.IS_TERMINAL

    # monitor taps duplicate the sink's own signal
    if p.monitor or (n is not None and (is_monitor_node(n) or is_internal_node(n))):
        f |= PortFlag.HIDDEN
    return f


def pretty_port_name(graph: PwGraph, p: PwPort) -> str:
    n = graph.nodes.get(p.node_id)
    if n is not None and p.channel and is_device_node(n):
        return f"{n.description} {channel_label(p.channel)}".strip()
    return p.alias
