"""
Pytest configuration and shared fakes for the dispatcher collaborators.
"""

import os

# no back-off between pending nonce retries while testing
os.environ.setdefault("NONCE_RPC_WAIT_SEC", "0")

import pytest

from txdispatch.core.options import GasPriceIncOpts, HandlerOpts

SENDER = "0x1111111111111111111111111111111111111111"
OTHER_SENDER = "0x2222222222222222222222222222222222222222"


class NonceTooLow(Exception):
    def __init__(self):
        super().__init__({"code": -32000, "message": "nonce too low"})


class FakeGate:
    """Admission gate recording every call it receives."""

    def __init__(self, can_queue=True, can_sign=True, insert_error=None, queue_error=None):
        self._can_queue = can_queue
        self._can_sign = can_sign
        self.insert_error = insert_error
        self.queue_error = queue_error
        self.calls = []
        self.inserted = []

    def can_queue(self, sender):
        self.calls.append(("can_queue", sender))
        if self.queue_error is not None:
            raise self.queue_error
        return self._can_queue

    def can_sign(self, sender):
        self.calls.append(("can_sign", sender))
        return self._can_sign

    def insert_initial(self, tx, opts, sender):
        self.calls.append(("insert_initial", sender))
        if self.insert_error is not None:
            raise self.insert_error
        self.inserted.append((tx, opts, sender))


class FakeNonceSource:
    """Returns queued nonces per account, or the last configured one."""

    def __init__(self, nonces=None, error=None):
        self.nonces = {k: list(v) if isinstance(v, list) else [v] for k, v in (nonces or {}).items()}
        self.error = error
        self.calls = []

    def pending_nonce_at(self, chain_id, account):
        self.calls.append((chain_id, account))
        if self.error is not None:
            raise self.error
        values = self.nonces.get(account, [0])
        if len(values) > 1:
            return values.pop(0)
        return values[0]


class RecordingSend:
    """Send callback returning a tx per nonce, failing with queued errors first."""

    def __init__(self, errors=()):
        self.errors = list(errors)
        self.nonces = []

    def __call__(self, nonce):
        self.nonces.append(nonce)
        if self.errors:
            raise self.errors.pop(0)
        return {"hash": f"0x{nonce:064x}", "nonce": nonce}


@pytest.fixture
def inc_opts():
    return GasPriceIncOpts(price_multiplier=1.2, max_price=100 * 10**9, increase_interval=60, check_interval=5)


@pytest.fixture
def opts(inc_opts):
    return HandlerOpts(sender_address=SENDER, gas_price_inc_opts=inc_opts)
