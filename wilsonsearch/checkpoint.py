"""Checkpoints of a search, kept in two alternating state files."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)

STATE_FILENAME_A = "stateA.ckp"
STATE_FILENAME_B = "stateB.ckp"

_MASK = (1 << 64) - 1
_HEADER = struct.Struct("<5Q2IQ")
_RESIDUE = struct.Struct("<2Q")

Residue = tuple[int, int]


@dataclass
class WorkStatus:
    """The persistent state of a search over [pmin, pmax)."""

    pmin: int = 0
    pmax: int = 0
    currp: int = 0
    trickle: int = 0
    totalcount: int = 0
    tpcount: int = 0
    done: bool = False
    state_sum: int = 0

    def pack(self) -> bytes:
        return _HEADER.pack(
            self.pmin,
            self.pmax,
            self.currp,
            self.trickle,
            self.totalcount,
            self.tpcount,
            int(self.done),
            self.state_sum,
        )

    @classmethod
    def unpack(cls, data: bytes) -> WorkStatus:
        pmin, pmax, currp, trickle, totalcount, tpcount, done, state_sum = _HEADER.unpack(
            data[: _HEADER.size]
        )
        return cls(pmin, pmax, currp, trickle, totalcount, tpcount, bool(done), state_sum)


def state_checksum(status: WorkStatus, residues: Iterable[Residue]) -> int:
    """Return the 64-bit wrapping checksum of a status and its residues."""
    total = (
        status.pmin
        + status.pmax
        + status.currp
        + status.trickle
        + status.totalcount
        + status.tpcount
        + int(status.done)
    )
    total += sum(s0 + s1 for s0, s1 in residues)
    return total & _MASK


class CheckpointStore:
    """Two state files written in turn, so one good copy always survives."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.write_a_next = True

    @property
    def path_a(self) -> Path:
        return self.directory / STATE_FILENAME_A

    @property
    def path_b(self) -> Path:
        return self.directory / STATE_FILENAME_B

    def write(self, status: WorkStatus, residues: Iterable[Residue]) -> None:
        """Store status and residues; sets status.state_sum.  Raises OSError."""
        residues = list(residues)
        if len(residues) != status.tpcount:
            raise ValueError(
                f"expected {status.tpcount} residues, got {len(residues)}"
            )
        status.state_sum = state_checksum(status, residues)
        data = status.pack() + b"".join(_RESIDUE.pack(s0, s1) for s0, s1 in residues)
        path = self.path_a if self.write_a_next else self.path_b
        path.write_bytes(data)
        self.write_a_next = not self.write_a_next

    def read(
        self, pmin: int, pmax: int, tpcount: int
    ) -> tuple[WorkStatus, list[Residue]] | None:
        """Return the most recent valid checkpoint, or None if there is none.

        A checkpoint marked done is returned as soon as it is found.
        """
        good: list[tuple[WorkStatus, list[Residue], bool]] = []
        for path, write_a_next in ((self.path_a, False), (self.path_b, True)):
            loaded = self._load(path, pmin, pmax, tpcount)
            if loaded is None:
                continue
            status, residues = loaded
            if status.done:
                return status, residues
            good.append((status, residues, write_a_next))

        if not good:
            return None
        if len(good) == 2:
            a, b = good
            chosen = a if a[0].currp > b[0].currp else b
        else:
            chosen = good[0]
        status, residues, write_a_next = chosen
        self.write_a_next = write_a_next
        return status, residues

    @staticmethod
    def _load(
        path: Path, pmin: int, pmax: int, tpcount: int
    ) -> tuple[WorkStatus, list[Residue]] | None:
        try:
            data = path.read_bytes()
        except OSError:
            return None
        needed = _HEADER.size + tpcount * _RESIDUE.size
        if len(data) < needed:
            log.warning("Cannot parse %s !!!", path.name)
            return None
        status = WorkStatus.unpack(data)
        residues = [
            _RESIDUE.unpack_from(data, _HEADER.size + i * _RESIDUE.size)
            for i in range(tpcount)
        ]
        if status.tpcount != tpcount or status.pmin != pmin or status.pmax != pmax:
            log.warning("Invalid checkpoint file %s !!!", path.name)
            return None
        if status.done:
            return status, residues
        if state_checksum(status, residues) != status.state_sum:
            log.warning("Checksum error in %s !!!", path.name)
            return None
        return status, residues