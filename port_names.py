# port_names.py
from __future__ import annotations

import re
from typing import List, Sequence, Tuple, Union

SEPARATORS = ("/", ":")

_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> Tuple[List[Union[int, str]], str]:
    """
    "system:capture_2" sorts before "system:capture_10"; letters compare case-insensitively.
    The raw name breaks ties so the order stays total.
    """
    key: List[Union[int, str]] = []
    for part in _DIGITS.split(name):
        if part.isdigit():
            key.append(int(part))
        else:
            key.append(part.lower())
    return key, name


def naturally_sorted(names: Sequence[str]) -> List[str]:
    return sorted(names, key=natural_key)


def port_has_prefix(name: str, prefix: str) -> bool:
    return name.startswith(prefix)


def prefix_through(name: str, sep: str) -> str:
    """
    The part of `name` up to and including the first `sep`, or "" when absent.
    """
    i = name.find(sep)
    if i < 0:
        return ""
    return name[: i + 1]


def common_prefix_before(names: Sequence[str], sep: str) -> str:
    if not names:
        return ""

    fp = prefix_through(names[0], sep)
    if not fp:
        return ""

    for n in names[1:]:
        if not n.startswith(fp):
            return ""
    return fp


def common_prefix(names: Sequence[str]) -> str:
    for sep in SEPARATORS:
        cp = common_prefix_before(names, sep)
        if cp:
            return cp
    return ""


def detect_separator(names: Sequence[str]) -> str:
    """
    "/" if every name contains one, else ":" if every name contains one, else "".
    """
    if not names:
        return ""
    for sep in SEPARATORS:
        if all(sep in n for n in names):
            return sep
    return ""


def split_port_runs(names: Sequence[str]) -> List[List[str]]:
    """
    Partition `names` into contiguous runs that share the prefix up to the
    detected separator. Input order is kept; with no separator the whole
    list is one run.
    """
    if not names:
        return []

    sep = detect_separator(names)
    if not sep:
        return [list(names)]

    runs: List[List[str]] = []
    cur: List[str] = []
    cur_prefix = ""
    for n in names:
        pf = prefix_through(n, sep)
        if cur and pf != cur_prefix:
            runs.append(cur)
            cur = []
        cur_prefix = pf
        cur.append(n)
    if cur:
        runs.append(cur)
    return runs


def bundle_name_for(names: Sequence[str]) -> str:
    pre = common_prefix(names)
    return pre[:-1] if pre else ""


def channel_label(name: str, prefix: str) -> str:
    if prefix and name.startswith(prefix):
        return name[len(prefix):]
    return name
