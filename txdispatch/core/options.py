import math
from dataclasses import dataclass, field

from eth_typing import ChecksumAddress
from eth_utils import (
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    to_checksum_address,
)
from web3 import Web3

from txdispatch.config import env
from txdispatch.core.constants import ZERO_ADDRESS
from txdispatch.core.errors import InvalidOptions


def normalize_address(address) -> ChecksumAddress:
    """Return the checksummed form of a non-zero address or raise InvalidOptions."""
    if not isinstance(address, str) or not address:
        raise InvalidOptions("sender address must be specified")
    if not is_address(address):
        raise InvalidOptions(f"sender address {address!r} is not a valid address")
    if is_checksum_formatted_address(address) and not is_checksum_address(address):
        raise InvalidOptions(f"sender address {address!r} has an invalid checksum")
    checksummed = to_checksum_address(address)
    if checksummed == ZERO_ADDRESS:
        raise InvalidOptions("sender address must be specified")
    return checksummed


@dataclass(frozen=True)
class GasPriceIncOpts:
    """Parameters handed to the gas price incrementor for a transaction."""

    price_multiplier: float
    max_price: int  # wei
    increase_interval: float  # seconds between bumps
    check_interval: float  # seconds between receipt checks

    @classmethod
    def from_env(cls) -> "GasPriceIncOpts":
        return cls(
            price_multiplier=env.GAS_BUMP_FACTOR,
            max_price=Web3.to_wei(env.MAX_GAS_PRICE_GWEI, "gwei"),
            increase_interval=env.TX_TIMEOUT_SEC,
            check_interval=env.TX_CHECK_INTERVAL_SEC,
        )

    def validate(self):
        for name in ("price_multiplier", "max_price", "increase_interval", "check_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidOptions(f"{name.replace('_', ' ')} must be a number, got {value!r}")
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidOptions(f"{name.replace('_', ' ')} must be finite, got {value!r}")
        if self.price_multiplier <= 1:
            raise InvalidOptions("price multiplier must be greater than 1")
        if self.max_price <= 0:
            raise InvalidOptions("max price must be greater than 0")
        if self.increase_interval <= 0:
            raise InvalidOptions("increase interval must be greater than 0")
        if self.check_interval <= 0:
            raise InvalidOptions("check interval must be greater than 0")


@dataclass(frozen=True)
class HandlerOpts:
    """Options given when sending a new transaction."""

    sender_address: str
    gas_price_inc_opts: GasPriceIncOpts
    # bypasses the queue/signer admission check, never the nonce tracking
    force_queue: bool = field(default=False)

    def validate(self) -> str:
        """Validate the options and return the checksummed sender address."""
        sender = normalize_address(self.sender_address)
        if not isinstance(self.gas_price_inc_opts, GasPriceIncOpts):
            raise InvalidOptions("gas price incrementor options must be specified")
        self.gas_price_inc_opts.validate()
        return sender
