import os

import fire
from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solders.hash import Hash
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from staking_examples.solana.util import (
    LAMPORTS_PER_SOL,
    broadcast,
    check_balance,
    sign_transaction,
)
from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.fireblocks import get_fireblocks, get_vault_address

DEVNET_FAUCET = "BwnMcTUT1wc5VDMvKQ8f1KGz6xGPxRnLGjqZU1fdWbVW"


def build_transfer(
    sender: Pubkey, receiver: Pubkey, lamports: int, blockhash: Hash
) -> Transaction:
    ix = transfer(TransferParams(from_pubkey=sender, to_pubkey=receiver, lamports=lamports))
    return Transaction.new_unsigned(Message.new_with_blockhash([ix], sender, blockhash))


def main(
    amount: int = LAMPORTS_PER_SOL // 100,
    to: str = DEVNET_FAUCET,
    network: str = "devnet",
):
    """
    Send a small transfer to check that the vault can sign Solana transactions.
    """
    load_env()
    env = require_env(*FIREBLOCKS_ENV)
    config = get_chain_config("solana", network)
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    sender = Pubkey.from_string(
        os.getenv("FIREBLOCKS_DELEGATOR_PUBLICKEY")
        or get_vault_address(fireblocks, vault_account_id, config.asset_id)
    )

    client = Client(config.node_endpoint(), commitment=Confirmed)
    if client.get_balance(sender).value <= 0:
        print(
            f"Insufficient funds\n"
            f"Insert additional funds at address {sender} e.g. by visiting https://solfaucet.com\n"
            f"Then run this program again."
        )
        return None

    blockhash = client.get_latest_blockhash().value.blockhash
    tx = build_transfer(sender, Pubkey.from_string(to), amount, blockhash)
    balance = check_balance(client, sender, tx, amount)
    print(f"Balance at account {sender}: {balance}")

    signed_tx = sign_transaction(fireblocks, vault_account_id, config.asset_id, tx, sender)
    tx_id = broadcast(client, signed_tx)
    show_tx(config, tx_id)
    return tx_id


if __name__ == "__main__":
    fire.Fire(main)
