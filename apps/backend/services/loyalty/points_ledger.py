"""
Points Ledger (Canonical)
=========================

Purpose:
- Per-payer points balances for a single user, with FIFO spending.
- Pure domain logic: no DB, no HTTP.
- Records grants (positive) and corrections (negative) from payers.
- Spends the oldest points first without pushing any payer below zero.

Design:
- Transaction keeps a residual: the part of its points not yet consumed.
- The balance aggregate is maintained incrementally alongside the log and
  always equals the sum of residuals per payer.
- spend computes against a working view and commits residuals, removals and
  balance deltas in one step under the ledger lock. A rejected spend leaves
  the state untouched.

Notes:
- Corrections are netted against the same payer's positive residuals (oldest
  first) before consumption, so a correction never lets a spend drive that
  payer negative and is never reported as a deduction.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from apps.backend.services.errors import (
    ADD_BAD_TYPES,
    SPEND_BAD_TYPE,
    InsufficientPoints,
    InvalidFieldType,
    InvalidPoints,
)

log = logging.getLogger("points.ledger")


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Transaction:
    """
    One grant or correction from a payer.
    points:
        + positive => points granted, drawn down by spends
        + negative => correction, netted against the payer's grants
    """
    payer: str
    points: int
    timestamp: datetime
    seq: int

    def sort_key(self) -> Tuple[datetime, int]:
        return (self.timestamp, self.seq)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payer": self.payer,
            "points": int(self.points),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SpendLine:
    payer: str
    points: int

    def to_dict(self) -> Dict[str, Any]:
        return {"payer": self.payer, "points": int(self.points)}


class PointsLedger:
    """
    Transaction log + balance aggregate for one user.

    All operations are atomic with respect to each other: record and spend
    mutate under the lock, reads return copies taken under the same lock.
    """

    def __init__(self) -> None:
        self._transactions: List[Transaction] = []
        self._balances: Dict[str, int] = {}
        self._seq = itertools.count()
        self._lock = threading.Lock()

    # -----------------------------
    # Record
    # -----------------------------
    def record(self, payer: str, points: int, timestamp: datetime) -> Transaction:
        if not isinstance(payer, str) or not payer:
            raise InvalidFieldType(ADD_BAD_TYPES)
        if not _is_int(points):
            raise InvalidFieldType(ADD_BAD_TYPES)
        if not isinstance(timestamp, datetime):
            raise InvalidFieldType(ADD_BAD_TYPES)

        with self._lock:
            txn = Transaction(
                payer=payer,
                points=int(points),
                timestamp=_as_utc(timestamp),
                seq=next(self._seq),
            )
            self._transactions.append(txn)
            self._balances[payer] = self._balances.get(payer, 0) + txn.points
            balance = self._balances[payer]

        log.info("Recorded %s points for payer=%s (balance=%s)", txn.points, payer, balance)
        return replace(txn)

    # -----------------------------
    # Spend
    # -----------------------------
    def spend(self, points: int) -> List[SpendLine]:
        if not _is_int(points):
            raise InvalidFieldType(SPEND_BAD_TYPE)
        if points <= 0:
            raise InvalidPoints()

        with self._lock:
            available = sum(self._balances.values())
            if points > available:
                log.warning("Rejected spend of %s points (available=%s)", points, available)
                raise InsufficientPoints(requested=points, available=available)

            ordered = sorted(self._transactions, key=Transaction.sort_key)
            residuals = {t.seq: t.points for t in ordered}

            self._net_corrections(ordered, residuals)
            spent = self._consume(ordered, residuals, points)

            # Commit
            kept: List[Transaction] = []
            for t in ordered:
                t.points = residuals[t.seq]
                if t.points != 0:
                    kept.append(t)
            self._transactions = kept
            for payer, delta in spent.items():
                self._balances[payer] += delta

        log.info("Spent %s points across %s payer(s)", points, len(spent))
        return [SpendLine(payer=p, points=v) for p, v in spent.items()]

    @staticmethod
    def _net_corrections(ordered: List[Transaction], residuals: Dict[int, int]) -> None:
        """
        Absorb each negative residual into the same payer's positive residuals,
        oldest first. Per-payer sums are unchanged.
        """
        for neg in ordered:
            if residuals[neg.seq] >= 0:
                continue
            for pos in ordered:
                if residuals[neg.seq] == 0:
                    break
                if pos.payer != neg.payer or residuals[pos.seq] <= 0:
                    continue
                absorbed = min(residuals[pos.seq], -residuals[neg.seq])
                residuals[pos.seq] -= absorbed
                residuals[neg.seq] += absorbed
                log.debug("Netted %s points of a %s correction", absorbed, neg.payer)

    @staticmethod
    def _consume(ordered: List[Transaction], residuals: Dict[int, int], points: int) -> Dict[str, int]:
        remaining = points
        spent: Dict[str, int] = {}
        for t in ordered:
            if remaining == 0:
                break
            if residuals[t.seq] <= 0:
                continue
            take = min(residuals[t.seq], remaining)
            residuals[t.seq] -= take
            remaining -= take
            spent[t.payer] = spent.get(t.payer, 0) - take
            log.debug("Took %s points from payer=%s (seq=%s)", take, t.payer, t.seq)
        return spent

    # -----------------------------
    # Reads
    # -----------------------------
    def balances(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._balances)

    def total(self) -> int:
        with self._lock:
            return sum(self._balances.values())

    def transactions(self) -> List[Transaction]:
        """Copies of the live log, oldest first."""
        with self._lock:
            return [replace(t) for t in sorted(self._transactions, key=Transaction.sort_key)]
