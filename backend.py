# backend.py
from __future__ import annotations

from typing import Dict, List, Optional

from models import DataType, PortFlag
from port_engine import PortEngine
from pw_dump import dump_graph
from pw_graph import port_flags, pretty_port_name, select_ports
from pw_types import PwGraph, PwPort


class PipeWirePortEngine(PortEngine):
    """
    Port engine over a PipeWire graph snapshot. Handles are PwPort objects.

    The snapshot only changes on refresh(); gather against a fixed snapshot
    is idempotent.
    """

    def __init__(self, graph: Optional[PwGraph] = None) -> None:
        self._graph: PwGraph = PwGraph(nodes={}, ports={})
        self._by_name: Dict[str, PwPort] = {}
        if graph is None:
            self.refresh()
        else:
            self.set_graph(graph)

    def refresh(self) -> None:
        self.set_graph(dump_graph())

    def set_graph(self, graph: PwGraph) -> None:
        self._graph = graph
        self._by_name = {p.full_name: p for p in graph.ports.values() if p.full_name}

    @property
    def graph(self) -> PwGraph:
        return self._graph

    def get_ports(self, data_type: DataType, inputs: bool) -> List[str]:
        return [p.full_name for p in select_ports(self._graph, data_type, "in" if inputs else "out")]

    def get_port_by_name(self, name: str) -> Optional[PwPort]:
        return self._by_name.get(name)

    def port_data_type(self, handle: object) -> DataType:
        if isinstance(handle, PwPort):
            return handle.data_type
        return DataType.NIL

    def get_port_flags(self, handle: object) -> PortFlag:
        if isinstance(handle, PwPort):
            return port_flags(self._graph, handle)
        return PortFlag.NONE

    def get_pretty_name_by_name(self, name: str) -> str:
        p = self._by_name.get(name)
        if p is None:
            return ""
        return pretty_port_name(self._graph, p)
