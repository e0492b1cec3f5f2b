import os

import fire
from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed, Finalized
from solders.pubkey import Pubkey

from staking_examples.solana.util import (
    LAMPORTS_PER_SOL,
    broadcast,
    check_balance,
    decode_transaction,
    sign_transaction,
)
from staking_examples.utils import (
    load_env,
    require_env,
    get_chain_config,
    show_tx,
    ValidatorNotFoundError,
)
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.fireblocks import get_fireblocks, get_vault_address


def check_validator(client: Client, validator_address: str):
    vote_accounts = client.get_vote_accounts(commitment=Finalized).value
    if not any(str(a.vote_pubkey) == validator_address for a in vote_accounts.current):
        raise ValidatorNotFoundError(
            "Validator address is not part of the active validators in the network"
        )


def main(amount: int = LAMPORTS_PER_SOL, network: str = None):
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV,
        "BLOCKDAEMON_STAKE_API_KEY",
        "SOLANA_NETWORK",
        "SOLANA_VALIDATOR_ADDRESS",
    )
    config = get_chain_config("solana", network or env["SOLANA_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]
    validator_address = env["SOLANA_VALIDATOR_ADDRESS"]

    fireblocks = get_fireblocks()
    delegator = os.getenv("FIREBLOCKS_DELEGATOR_PUBLICKEY") or get_vault_address(
        fireblocks, vault_account_id, config.asset_id
    )
    delegator_address = Pubkey.from_string(delegator)
    print(f"Solana address: {delegator_address}\n")

    client = Client(config.node_endpoint(), commitment=Confirmed)
    check_validator(client, validator_address)

    request = {
        "amount": str(amount),
        "validator_address": validator_address,
        "delegator_address": str(delegator_address),
    }
    if os.getenv("PLAN_ID"):
        request["plan_id"] = os.environ["PLAN_ID"]
    api = StakingApiClient(env["BLOCKDAEMON_STAKE_API_KEY"])
    intent = api.create_stake_intent(config, request)
    solana = intent["solana"]
    print(f"Stake account: {solana.get('stake_account_public_key')}")

    tx = decode_transaction(solana["unsigned_transaction"])
    check_balance(client, delegator_address, tx, int(solana["amount"]))

    signed_tx = sign_transaction(
        fireblocks, vault_account_id, config.asset_id, tx, delegator_address
    )
    tx_id = broadcast(client, signed_tx)
    show_tx(config, tx_id)
    return tx_id


if __name__ == "__main__":
    fire.Fire(main)
