class DispatchError(Exception):
    """Base class for every error raised by the transaction dispatcher."""


class InvalidOptions(DispatchError):
    """Submission options failed local validation."""


class QueueFull(DispatchError):
    """The gas price escalation queue is full; retry the transaction later."""

    def __init__(self, message: str = "failed to send a transaction, blockchain queue is full"):
        super().__init__(message)


class NoSigners(DispatchError):
    """No signer is available to escalate gas price for this sender."""

    def __init__(self, message: str = "failed to send a transaction, no signers for incrementing"):
        super().__init__(message)


class NonceLookupError(DispatchError):
    """The pending nonce could not be fetched from the network."""


class SendError(DispatchError):
    """The send callback failed with an error that is not retried."""


class NonceRecoveryError(SendError):
    """The nonce was re-fetched after a nonce error but the resend failed too."""


class ChainNotConfigured(DispatchError):
    """No RPC client is configured for the requested chain id."""
