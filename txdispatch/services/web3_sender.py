from dataclasses import dataclass
from typing import Dict

from eth_account.signers.local import LocalAccount
from web3 import Web3

from txdispatch.config import env
from txdispatch.core.interfaces import TransactionSendFn
from txdispatch.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SentTransaction:
    hash: str
    nonce: int
    sender: str
    chain_id: int
    gas_price: int
    raw: bytes


def _gas_price(w3: Web3) -> int:
    current = w3.eth.gas_price
    cap = Web3.to_wei(env.MAX_GAS_PRICE_GWEI, 'gwei')
    if current > cap:
        logger.warning(f"Gas price {Web3.from_wei(current, 'gwei')} gwei above cap, using {env.MAX_GAS_PRICE_GWEI} gwei")
        return cap
    return current


def build_send_fn(w3: Web3, account: LocalAccount, chain_id: int, tx_params: Dict) -> TransactionSendFn:
    """Return a send callback that signs tx_params with account for a given nonce and broadcasts it.

    Node errors are not caught so the dispatcher can tell nonce errors apart.
    """

    def send(nonce: int) -> SentTransaction:
        txn = dict(tx_params)
        txn["from"] = account.address
        txn["nonce"] = nonce
        txn["chainId"] = chain_id
        if "gasPrice" not in txn and "maxFeePerGas" not in txn:
            txn["gasPrice"] = _gas_price(w3)
        if "gas" not in txn:
            txn["gas"] = w3.eth.estimate_gas(txn)

        signed = account.sign_transaction(txn)
        w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash = Web3.to_hex(signed.hash)
        logger.info(f"Sent tx {tx_hash} from {account.address} with nonce {nonce}")

        return SentTransaction(
            hash=tx_hash,
            nonce=nonce,
            sender=account.address,
            chain_id=chain_id,
            gas_price=txn.get("gasPrice", txn.get("maxFeePerGas")),
            raw=bytes(signed.raw_transaction),
        )

    return send
