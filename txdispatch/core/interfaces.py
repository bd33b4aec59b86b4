from typing import Any, Callable, Protocol

from txdispatch.core.options import GasPriceIncOpts

# Wraps a transaction execution: takes the nonce to use and returns the
# submitted transaction, raising if the submission failed.
TransactionSendFn = Callable[[int], Any]

ErrorSink = Callable[[Exception], None]


class AdmissionGate(Protocol):
    """What the dispatcher needs from the gas price incrementor."""

    def can_queue(self, sender: str) -> bool:
        """Return True if another transaction can be queued for sender."""
        ...

    def can_sign(self, sender: str) -> bool:
        """Return True if the incrementor can sign bumped transactions for sender."""
        ...

    def insert_initial(self, tx: Any, opts: GasPriceIncOpts, sender: str) -> None:
        """Start tracking a freshly sent transaction."""
        ...


class NonceSource(Protocol):
    def pending_nonce_at(self, chain_id: int, account: str) -> int:
        ...
