from txdispatch.core.dispatcher import TransactionDispatcher
from txdispatch.core.errors import (
    ChainNotConfigured,
    DispatchError,
    InvalidOptions,
    NonceLookupError,
    NonceRecoveryError,
    NoSigners,
    QueueFull,
    SendError,
)
from txdispatch.core.nonce_manager import is_nonce_error
from txdispatch.core.options import GasPriceIncOpts, HandlerOpts
from txdispatch.core.tx_queue import PendingTxQueue

__all__ = [
    "TransactionDispatcher",
    "GasPriceIncOpts",
    "HandlerOpts",
    "PendingTxQueue",
    "is_nonce_error",
    "DispatchError",
    "InvalidOptions",
    "QueueFull",
    "NoSigners",
    "NonceLookupError",
    "SendError",
    "NonceRecoveryError",
    "ChainNotConfigured",
]
