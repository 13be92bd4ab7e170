# port_engine.py
from __future__ import annotations

from typing import Dict, List, Optional

from models import DataType, PortFlag, PortInfo


class PortEngine:
    """
    Raw port enumeration and metadata, as the audio backend sees it.

    Handles are opaque; `None` means "no such port".
    """

    def get_ports(self, data_type: DataType, inputs: bool) -> List[str]:
        raise NotImplementedError

    def get_port_by_name(self, name: str) -> Optional[object]:
        raise NotImplementedError

    def port_data_type(self, handle: object) -> DataType:
        raise NotImplementedError

    def get_port_flags(self, handle: object) -> PortFlag:
        raise NotImplementedError

    def get_pretty_name_by_name(self, name: str) -> str:
        return ""


class PortRegistry(PortEngine):
    """
    In-memory port engine. Handles are the registered PortInfo objects.
    """

    def __init__(self) -> None:
        self._ports: Dict[str, PortInfo] = {}

    def register(
        self,
        name: str,
        data_type: DataType,
        flags: PortFlag,
        pretty_name: str = "",
    ) -> PortInfo:
        info = PortInfo(name=name, data_type=data_type, flags=PortFlag(flags), pretty_name=pretty_name)
        self._ports[name] = info
        return info

    def unregister(self, name: str) -> None:
        self._ports.pop(name, None)

    def ports(self) -> List[PortInfo]:
        return list(self._ports.values())

    def get_ports(self, data_type: DataType, inputs: bool) -> List[str]:
        want = PortFlag.IS_INPUT if inputs else PortFlag.IS_OUTPUT
        out: List[str] = []
        for p in self._ports.values():
            if not p.flags & want:
                continue
            if data_type is not DataType.NIL and p.data_type is not data_type:
                continue
            out.append(p.name)
        return out

    def get_port_by_name(self, name: str) -> Optional[PortInfo]:
        return self._ports.get(name)

    def port_data_type(self, handle: object) -> DataType:
        if isinstance(handle, PortInfo):
            return handle.data_type
        return DataType.NIL

    def get_port_flags(self, handle: object) -> PortFlag:
        if isinstance(handle, PortInfo):
            return handle.flags
        return PortFlag.NONE

    def get_pretty_name_by_name(self, name: str) -> str:
        p = self._ports.get(name)
        return p.pretty_name if p else ""
