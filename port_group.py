# port_group.py
from __future__ import annotations

import weakref
from typing import Callable, Iterator, List, Optional

from PySide6.QtCore import QMetaObject, QObject, Signal
from PySide6.QtGui import QColor

from bundle import Bundle
from models import ChanCount
from routing import IO


class BundleRecord:
    """
    One bundle's membership in a PortGroup. The owning IO is held weakly.
    """

    def __init__(self, bundle: Bundle, io: Optional[IO], color: Optional[QColor]) -> None:
        self.bundle = bundle
        self._io_ref = weakref.ref(io) if io is not None else None
        self.color = QColor(color) if color is not None else QColor()
        self.has_color = color is not None
        self._conn: Optional[QMetaObject.Connection] = None

    def io(self) -> Optional[IO]:
        if self._io_ref is None:
            return None
        return self._io_ref()

    def connect(self, slot: Callable[[int], None]) -> None:
        self._conn = self.bundle.changed.connect(slot)

    def disconnect(self) -> None:
        # by handle: a bundle shared between records keeps its other subscriptions
        if self._conn is None:
            return
        QObject.disconnect(self._conn)
        self._conn = None


class PortGroup(QObject):
    changed = Signal()
    bundle_changed = Signal(int)

    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name
        self._bundles: List[BundleRecord] = []

    def __repr__(self) -> str:
        return f"<PortGroup {self.name!r} {len(self._bundles)} bundles>"

    def __len__(self) -> int:
        return len(self._bundles)

    def __iter__(self) -> Iterator[BundleRecord]:
        return iter(list(self._bundles))

    def bundles(self) -> List[BundleRecord]:
        return list(self._bundles)

    def bundle_list(self) -> List[Bundle]:
        return [r.bundle for r in self._bundles]

    def add_bundle(
        self,
        bundle: Optional[Bundle],
        io: Optional[IO] = None,
        color: Optional[QColor] = None,
        allow_dups: bool = False,
    ) -> None:
        if bundle is None:
            raise ValueError(f"PortGroup {self.name!r}: cannot add a missing bundle")

        if not allow_dups:
            for r in self._bundles:
                if bundle.has_same_ports(r.bundle):
                    return

        rec = BundleRecord(bundle, io, color)
        rec.connect(self._on_bundle_changed)
        self._bundles.append(rec)

        self.changed.emit()

    def remove_bundle(self, bundle: Bundle) -> None:
        for i, r in enumerate(self._bundles):
            if r.bundle is bundle:
                r.disconnect()
                del self._bundles[i]
                self.changed.emit()
                return

    def clear(self) -> None:
        for r in self._bundles:
            r.disconnect()
        self._bundles.clear()
        self.changed.emit()

    def has_port(self, port: str) -> bool:
        return any(r.bundle.offers_port_alone(port) for r in self._bundles)

    def only_bundle(self) -> Bundle:
        if len(self._bundles) != 1:
            raise ValueError(f"PortGroup {self.name!r} holds {len(self._bundles)} bundles, expected exactly one")
        return self._bundles[0].bundle

    def total_channels(self) -> ChanCount:
        n = ChanCount()
        for r in self._bundles:
            n = n + r.bundle.nchannels()
        return n

    def io_from_bundle(self, bundle: Bundle) -> Optional[IO]:
        for r in self._bundles:
            if r.bundle is bundle:
                return r.io()
        return None

    def record_for(self, bundle: Bundle) -> Optional[BundleRecord]:
        for r in self._bundles:
            if r.bundle is bundle:
                return r
        return None

    def remove_duplicates(self) -> None:
        """
        Drop bundles whose every channel is already present, as the same
        port set, on some larger bundle of this group.
        """
        removed = False
        i = 0
        while i < len(self._bundles):
            small = self._bundles[i].bundle
            if any(_subsumes(r.bundle, small) for r in self._bundles if r.bundle is not small):
                self._bundles[i].disconnect()
                del self._bundles[i]
                removed = True
                continue
            i += 1

        if removed:
            self.changed.emit()

    def _on_bundle_changed(self, change: int) -> None:
        self.bundle_changed.emit(change)


def _subsumes(large: Bundle, small: Bundle) -> bool:
    if not large.nchannels() > small.nchannels():
        return False

    large_sets = [frozenset(large.channel_ports(j)) for j in range(large.n_total())]
    for k in range(small.n_total()):
        if frozenset(small.channel_ports(k)) not in large_sets:
            return False
    return True
