from typing import Any, Optional

from txdispatch.core import metrics
from txdispatch.core.errors import DispatchError, NoSigners, QueueFull
from txdispatch.core.interfaces import AdmissionGate, ErrorSink, NonceSource, TransactionSendFn
from txdispatch.core.logger import get_logger
from txdispatch.core.nonce_manager import NonceManager
from txdispatch.core.options import HandlerOpts, normalize_address

logger = get_logger(__name__)


class TransactionDispatcher:
    """Sends transactions with a tracked nonce and hands them to the gas price incrementor.

    The incrementor is expected to be created and started by the caller.
    """

    def __init__(self, gate: AdmissionGate, nonce_source: NonceSource):
        self.gate = gate
        self.nonces = NonceManager(nonce_source)
        self._error_sink: Optional[ErrorSink] = None

    def attach_error_sink(self, fn: ErrorSink):
        """Attach a callable receiving non-fatal errors.

        Not thread safe: call it before the first send_with_gas_price_handling.
        """
        self._error_sink = fn

    def nonce_for(self, account: str) -> Optional[int]:
        """Return the cached next nonce for account, or None if not cached yet."""
        return self.nonces.cached(normalize_address(account))

    # ------------------------------------------------------------------
    def send_with_gas_price_handling(self, chain_id: int, opts: HandlerOpts, send_fn: TransactionSendFn) -> Any:
        """Send a transaction with a valid nonce and register it for gas price increments."""
        try:
            sender = opts.validate()
        except Exception as exc:
            metrics.increment_dispatch(type(exc).__name__)
            raise

        try:
            self._check_admission(opts, sender)
        except DispatchError as exc:
            metrics.increment_dispatch(type(exc).__name__)
            raise
        except Exception:
            metrics.increment_dispatch("admission_query_failed")
            raise

        try:
            tx = self.nonces.send(chain_id, sender, send_fn)
        except Exception as exc:
            metrics.increment_dispatch(type(exc).__name__)
            raise

        metrics.increment_dispatch("sent")
        logger.info(f"Dispatched transaction for {sender} on chain {chain_id}")

        try:
            self.gate.insert_initial(tx, opts.gas_price_inc_opts, sender)
        except Exception as exc:
            self._report(DispatchError(f"failed to insert initial entry for gas price incrementor: {exc}"), exc)

        return tx

    def _check_admission(self, opts: HandlerOpts, sender: str):
        if opts.force_queue:
            return

        # errors from the query itself propagate as they are
        if not self.gate.can_queue(sender):
            raise QueueFull()

        if not self.gate.can_sign(sender):
            raise NoSigners()

    def _report(self, err: DispatchError, cause: Exception):
        err.__cause__ = cause
        metrics.increment_sink_error()
        logger.warning(str(err))
        if self._error_sink is not None:
            self._error_sink(err)
