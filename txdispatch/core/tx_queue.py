import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Set

from txdispatch.config import env
from txdispatch.core.logger import get_logger
from txdispatch.core.options import GasPriceIncOpts, normalize_address

logger = get_logger(__name__)


@dataclass
class PendingEntry:
    tx: Any
    opts: GasPriceIncOpts
    sender: str
    inserted_at: float
    bumps: int = 0


def _tx_hash(tx: Any) -> Any:
    if isinstance(tx, dict):
        return tx.get("hash")
    return getattr(tx, "hash", tx)


class PendingTxQueue:
    """In-memory admission gate keeping the transactions awaiting gas price bumps.

    It answers whether a sender may queue more transactions and whether a
    signer is registered for it. Raising the gas price is left to whoever
    consumes the queue.
    """

    def __init__(self, capacity: int = env.QUEUE_CAPACITY_PER_SENDER, signers: Iterable[str] = ()):
        if capacity <= 0:
            raise ValueError("queue capacity must be greater than 0")
        self.capacity = capacity
        self._signers: Set[str] = {normalize_address(s) for s in signers}
        self._pending: Dict[str, List[PendingEntry]] = {}
        self._lock = threading.Lock()

    def add_signer(self, address: str):
        with self._lock:
            self._signers.add(normalize_address(address))

    def remove_signer(self, address: str):
        with self._lock:
            self._signers.discard(normalize_address(address))

    # ------------------------------------------------------------------
    def can_queue(self, sender: str) -> bool:
        sender = normalize_address(sender)
        with self._lock:
            return len(self._pending.get(sender, [])) < self.capacity

    def can_sign(self, sender: str) -> bool:
        sender = normalize_address(sender)
        with self._lock:
            return sender in self._signers

    def insert_initial(self, tx: Any, opts: GasPriceIncOpts, sender: str):
        opts.validate()
        sender = normalize_address(sender)
        entry = PendingEntry(tx=tx, opts=opts, sender=sender, inserted_at=time.time())
        with self._lock:
            entries = self._pending.setdefault(sender, [])
            entries.append(entry)
            size = len(entries)
        logger.info(f"Tracking tx {_tx_hash(tx)} for {sender} ({size}/{self.capacity} queued)")

    # ------------------------------------------------------------------
    def pending(self, sender: str) -> List[PendingEntry]:
        sender = normalize_address(sender)
        with self._lock:
            return list(self._pending.get(sender, []))

    def mark_mined(self, sender: str, tx_hash: Any) -> bool:
        sender = normalize_address(sender)
        with self._lock:
            entries = self._pending.get(sender, [])
            for i, entry in enumerate(entries):
                if _tx_hash(entry.tx) == tx_hash:
                    del entries[i]
                    logger.info(f"Tx {tx_hash} mined")
                    return True
        return False
