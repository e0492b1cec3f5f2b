import uuid
from typing import List, Tuple

import fire
from eth_abi import decode
from web3 import Web3

from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.encoding import hex_to_bytes
from staking_examples.utils.fireblocks import (
    contract_call,
    get_fireblocks,
    get_vault_address,
)

GWEI = 10**9
# batchDeposit(uint256 validUntil, bytes args)
BATCH_DEPOSIT_SELECTOR = "0x592c0b7d"
# 32 ETH in gwei, one validator
VALIDATOR_AMOUNT = "32000000000"


def decode_batch_deposit(unsigned_transaction: str) -> Tuple[int, bytes]:
    if not unsigned_transaction.lower().startswith(BATCH_DEPOSIT_SELECTOR):
        raise ValueError(
            f"Unsigned transaction does not call batchDeposit ({BATCH_DEPOSIT_SELECTOR})"
        )
    data = hex_to_bytes(unsigned_transaction)[4:]
    valid_until, args = decode(["uint256", "bytes"], data)
    return valid_until, args


def total_deposit_wei(stakes: List[dict]) -> int:
    return sum(int(s["amount"]) for s in stakes) * GWEI


def deposit_amount_ether(stakes: List[dict]) -> str:
    # Fireblocks rejects exponent notation
    return format(Web3.from_wei(total_deposit_wei(stakes), "ether"), "f")


def main(
    amount: str = VALIDATOR_AMOUNT,
    network: str = None,
    idempotency_key: str = None,
):
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV,
        "BLOCKDAEMON_STAKE_API_KEY",
        "BLOCKDAEMON_API_KEY",
        "ETHEREUM_NETWORK",
        "ETHEREUM_WITHDRAWAL_ADDRESS",
    )
    config = get_chain_config("ethereum", network or env["ETHEREUM_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]
    withdrawal_address = env["ETHEREUM_WITHDRAWAL_ADDRESS"]

    fireblocks = get_fireblocks()
    address = Web3.to_checksum_address(
        get_vault_address(fireblocks, vault_account_id, config.asset_id)
    )
    print(f"Ethereum address: {address}")

    w3 = Web3(Web3.HTTPProvider(config.node_endpoint(env["BLOCKDAEMON_API_KEY"])))
    print(f"Initial balance: {w3.eth.get_balance(address)}")

    client = StakingApiClient(env["BLOCKDAEMON_STAKE_API_KEY"])
    intent = client.create_stake_intent(
        config,
        {
            "stakes": [
                {
                    "amount": str(amount),
                    "withdrawal_address": withdrawal_address,
                    "fee_recipient": withdrawal_address,
                }
            ]
        },
        idempotency_key=idempotency_key or str(uuid.uuid4()),
    )
    ethereum = intent["ethereum"]
    unsigned_transaction = ethereum["unsigned_transaction"]

    valid_until, _ = decode_batch_deposit(unsigned_transaction)
    print(f"Deposit data valid until: {valid_until}")

    tx = contract_call(
        fireblocks,
        vault_account_id,
        config.asset_id,
        ethereum["contract_address"],
        deposit_amount_ether(ethereum["stakes"]),
        unsigned_transaction,
        note=f"Ethereum batch deposit {intent['stake_intent_id']}",
    )
    tx_hash = tx["txHash"]
    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    print(f"Included in block {receipt['blockNumber']}")
    show_tx(config, tx_hash)
    return tx_hash


if __name__ == "__main__":
    fire.Fire(main)
