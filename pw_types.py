# pw_types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from models import DataType


@dataclass(frozen=True)
class PwNode:
    id: int
    name: str
    description: str
    media_class: str
    props: Dict[str, str]


@dataclass(frozen=True)
class PwPort:
    id: int
    node_id: int
    node_name: str
    port_name: str
    direction: str       # "in" | "out" | ""
    channel: str         # "FL","FR","AUX0"... or ""
    full_name: str       # "node.name:port.name" or ""
    data_type: DataType
    physical: bool = False
    terminal: bool = False
    monitor: bool = False
    alias: str = ""


@dataclass
class PwGraph:
    nodes: Dict[int, PwNode]
    ports: Dict[int, PwPort]
