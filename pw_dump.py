# pw_dump.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pw_channels import channel_from_port_props, data_type_from_format
from pw_cli import pw_dump_json
from pw_types import PwGraph, PwNode, PwPort


logger = logging.getLogger(__name__)


def props_from_obj(obj: Dict[str, Any]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for src in (obj.get("props") or {}, (obj.get("info") or {}).get("props") or {}):
        if not isinstance(src, dict):
            continue
        for k, v in src.items():
            out[str(k)] = "" if v is None else str(v)
    return out


def prop_flag(pr: Dict[str, str], key: str) -> bool:
    return (pr.get(key) or "").strip().lower() in ("true", "1", "yes")


def node_media_class(pr: Dict[str, str]) -> str:
    return pr.get("media.class", "") or ""


def node_name(pr: Dict[str, str]) -> str:
    return pr.get("node.name", "") or ""


def node_desc(pr: Dict[str, str]) -> str:
    return pr.get("node.description") or pr.get("node.nick") or pr.get("node.name") or ""


def port_name(pr: Dict[str, str]) -> str:
    return pr.get("port.name", "") or ""


def port_direction(pr: Dict[str, str], info: Dict[str, Any]) -> str:
    d = (pr.get("port.direction") or "").strip().lower()
    if d in ("in", "out"):
        return d
    d2 = (info.get("direction") or "").strip().lower() if isinstance(info, dict) else ""
    if d2 in ("in", "input"):
        return "in"
    if d2 in ("out", "output"):
        return "out"
    return ""


def _obj_id(obj: Dict[str, Any]) -> Optional[int]:
    try:
        return int(obj.get("id"))
    except (TypeError, ValueError):
        logger.warning("pw-dump object without a usable id: %r", obj.get("id"))
        return None


def _objects_of(data: List[Any], suffix: str) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for obj in data:
        if not isinstance(obj, dict):
            continue
        if str(obj.get("type") or "").endswith(suffix):
            out.append(obj)
    return out


def graph_from_dump(data: List[Any]) -> PwGraph:
    nodes: Dict[int, PwNode] = {}
    ports: Dict[int, PwPort] = {}

    for obj in _objects_of(data, ":Node"):
        oid = _obj_id(obj)
        if oid is None:
            continue
        pr = props_from_obj(obj)
        nodes[oid] = PwNode(
            id=oid,
            name=node_name(pr),
            description=node_desc(pr),
            media_class=node_media_class(pr),
            props=pr,
        )

    for obj in _objects_of(data, ":Port"):
        oid = _obj_id(obj)
        if oid is None:
            continue
        pr = props_from_obj(obj)
        info = obj.get("info") or {}

        try:
            nid = int(pr.get("node.id", "0"))
        except ValueError:
            nid = 0

        n = nodes.get(nid)
        nname = n.name if n else ""

        pname = port_name(pr)
        full = f"{nname}:{pname}" if nname and pname else ""

        ports[oid] = PwPort(
            id=oid,
            node_id=nid,
            node_name=nname,
            port_name=pname,
            direction=port_direction(pr, info),
            channel=channel_from_port_props(pr),
            full_name=full,
            data_type=data_type_from_format(pr.get("format.dsp", "")),
            physical=prop_flag(pr, "port.physical"),
            terminal=prop_flag(pr, "port.terminal"),
            monitor=prop_flag(pr, "port.monitor"),
            alias=pr.get("port.alias", "") or "",
        )

    return PwGraph(nodes=nodes, ports=ports)


def dump_graph() -> PwGraph:
    return graph_from_dump(pw_dump_json())
