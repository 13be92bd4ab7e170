# pw_channels.py
from __future__ import annotations

from typing import Dict

from models import DataType


CHANNEL_LABELS = {
    "MONO": "Mono",
    "FL": "Front Left",
    "FR": "Front Right",
    "FC": "Front Center",
    "LFE": "LFE",
    "SL": "Side Left",
    "SR": "Side Right",
    "RL": "Rear Left",
    "RR": "Rear Right",
}


def normalize_channel(v: str) -> str:
    s = (v or "").strip().lower()
    if not s:
        return ""

    m = {
        "fl": "FL", "front-left": "FL",
        "fr": "FR", "front-right": "FR",
        "fc": "FC", "front-center": "FC",
        "lfe": "LFE", "low-frequency": "LFE",
        "rl": "RL", "rear-left": "RL",
        "rr": "RR", "rear-right": "RR",
        "sl": "SL", "side-left": "SL",
        "sr": "SR", "side-right": "SR",
        "mono": "MONO",
    }
    if s in m:
        return m[s]

    if s.startswith("aux"):
        tail = s[3:]
        if tail.isdigit():
            return f"AUX{int(tail)}"

    return s.upper()


def channel_from_port_props(props: Dict[str, str]) -> str:
    v = (props.get("audio.channel") or props.get("audio.position") or "").strip()
    if v:
        return normalize_channel(v)

    pn = (props.get("port.name") or "").strip()
    if not pn:
        return ""

    parts = pn.split("_")
    if len(parts) >= 2:
        ch = normalize_channel(parts[-1])
        if ch in CHANNEL_LABELS or ch.startswith("AUX"):
            return ch

    return ""


def channel_label(ch: str) -> str:
    if ch.startswith("AUX") and ch[3:].isdigit():
        return f"Aux {int(ch[3:]) + 1}"
    return CHANNEL_LABELS.get(ch, ch)


def data_type_from_format(dsp: str) -> DataType:
    """
    Map a port's `format.dsp` ("32 bit float mono audio", "8 bit raw midi", "32 bit raw UMP").
    """
    s = (dsp or "").strip().lower()
    if s.endswith("audio"):
        return DataType.AUDIO
    if s.endswith("midi") or s.endswith("ump"):
        return DataType.MIDI
    return DataType.NIL
