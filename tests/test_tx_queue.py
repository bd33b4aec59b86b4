from dataclasses import replace

import pytest

from txdispatch.core.dispatcher import TransactionDispatcher
from txdispatch.core.errors import InvalidOptions, NoSigners, QueueFull
from txdispatch.core.tx_queue import PendingTxQueue

from conftest import OTHER_SENDER, SENDER, FakeNonceSource, RecordingSend


def test_can_queue_until_capacity(inc_opts):
    queue = PendingTxQueue(capacity=2, signers=[SENDER])

    assert queue.can_queue(SENDER)
    queue.insert_initial({"hash": "0x01"}, inc_opts, SENDER)
    assert queue.can_queue(SENDER)
    queue.insert_initial({"hash": "0x02"}, inc_opts, SENDER)
    assert not queue.can_queue(SENDER)
    assert queue.can_queue(OTHER_SENDER)


def test_mark_mined_frees_capacity(inc_opts):
    queue = PendingTxQueue(capacity=1, signers=[SENDER])
    queue.insert_initial({"hash": "0x01"}, inc_opts, SENDER)

    assert queue.mark_mined(SENDER, "0x01")
    assert not queue.mark_mined(SENDER, "0x01")
    assert queue.can_queue(SENDER)
    assert queue.pending(SENDER) == []


def test_signers(inc_opts):
    queue = PendingTxQueue(signers=[SENDER])
    assert queue.can_sign(SENDER)
    assert not queue.can_sign(OTHER_SENDER)

    queue.add_signer(OTHER_SENDER)
    queue.remove_signer(SENDER)

    assert queue.can_sign(OTHER_SENDER)
    assert not queue.can_sign(SENDER)


def test_insert_initial_records_entry(inc_opts):
    queue = PendingTxQueue()
    queue.insert_initial({"hash": "0xaa"}, inc_opts, SENDER.lower())

    [entry] = queue.pending(SENDER)
    assert entry.tx == {"hash": "0xaa"}
    assert entry.opts == inc_opts
    assert entry.bumps == 0
    assert entry.inserted_at > 0


def test_insert_initial_validates_opts(inc_opts):
    queue = PendingTxQueue()
    with pytest.raises(InvalidOptions):
        queue.insert_initial({"hash": "0xaa"}, replace(inc_opts, max_price=0), SENDER)
    assert queue.pending(SENDER) == []


def test_invalid_capacity():
    with pytest.raises(ValueError):
        PendingTxQueue(capacity=0)


def test_dispatcher_with_pending_queue(opts):
    queue = PendingTxQueue(capacity=2, signers=[SENDER])
    dispatcher = TransactionDispatcher(queue, FakeNonceSource({SENDER: 0}))
    send = RecordingSend()

    first = dispatcher.send_with_gas_price_handling(1, opts, send)
    second = dispatcher.send_with_gas_price_handling(1, opts, send)

    with pytest.raises(QueueFull):
        dispatcher.send_with_gas_price_handling(1, opts, send)

    assert [e.tx for e in queue.pending(SENDER)] == [first, second]
    assert send.nonces == [0, 1]

    # forced transactions go past capacity
    forced = dispatcher.send_with_gas_price_handling(1, replace(opts, force_queue=True), send)
    assert forced["nonce"] == 2
    assert len(queue.pending(SENDER)) == 3

    queue.mark_mined(SENDER, first["hash"])
    queue.mark_mined(SENDER, second["hash"])
    assert dispatcher.send_with_gas_price_handling(1, opts, send)["nonce"] == 3


def test_dispatcher_without_signer(opts):
    dispatcher = TransactionDispatcher(PendingTxQueue(), FakeNonceSource({SENDER: 0}))

    with pytest.raises(NoSigners):
        dispatcher.send_with_gas_price_handling(1, opts, RecordingSend())
