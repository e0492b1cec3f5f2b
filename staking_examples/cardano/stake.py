import os
from typing import List

import fire
from blockfrost import ApiUrls, BlockFrostApi
from fireblocks_sdk import UnsignedMessage
from pycardano import (
    Transaction,
    TransactionBody,
    TransactionWitnessSet,
    VerificationKey,
    VerificationKeyWitness,
)

from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.fireblocks import (
    SignedMessage,
    get_fireblocks,
    get_vault_address,
    sign_raw_messages,
)
from staking_examples.utils.network import ChainConfig

# the stake key lives on the "chimeric" change index of the vault account
STAKE_KEY_CHANGE_INDEX = 2


def decode_transaction_body(unsigned_transaction_hex: str) -> TransactionBody:
    return TransactionBody.from_cbor(unsigned_transaction_hex)


def create_signed_transaction(
    body: TransactionBody, signed_messages: List[SignedMessage]
) -> Transaction:
    witnesses = [
        VerificationKeyWitness(
            VerificationKey.from_primitive(bytes.fromhex(m.public_key)),
            bytes.fromhex(m.signature),
        )
        for m in signed_messages
    ]
    return Transaction(body, TransactionWitnessSet(vkey_witnesses=witnesses))


def show_balance(config: ChainConfig, address: str):
    project_id = os.getenv("BLOCKFROST_PROJECT_ID")
    if project_id is None:
        return
    api = BlockFrostApi(
        project_id=project_id, base_url=getattr(ApiUrls, config.network).value
    )
    lovelace = sum(
        int(a.quantity) for a in api.address(address).amount if a.unit == "lovelace"
    )
    print(f"Balance of {address}: {lovelace} lovelace")


def main(network: str = None):
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV, "BLOCKDAEMON_STAKE_API_KEY", "PLAN_ID", "CARDANO_NETWORK"
    )
    config = get_chain_config("cardano", network or env["CARDANO_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    base_address = get_vault_address(fireblocks, vault_account_id, config.asset_id)
    print(f"Cardano address: {base_address}\n")
    show_balance(config, base_address)

    client = StakingApiClient(env["BLOCKDAEMON_STAKE_API_KEY"])
    intent = client.create_stake_intent(
        config, {"base_address": base_address, "plan_id": env["PLAN_ID"]}
    )
    body = decode_transaction_body(intent["cardano"]["unsigned_transaction"])
    tx_hash = body.hash().hex()
    print(f"Transaction Hash: {tx_hash}")

    # payment key and stake key both witness the registration + delegation
    signed_messages = sign_raw_messages(
        fireblocks,
        vault_account_id,
        config.asset_id,
        [
            UnsignedMessage(tx_hash),
            UnsignedMessage(tx_hash, bip44change=STAKE_KEY_CHANGE_INDEX),
        ],
        note=f"Cardano stake intent {intent.get('stake_intent_id')}",
    )

    signed_tx = create_signed_transaction(body, signed_messages)
    print(f"Signed transaction (CBOR): {signed_tx.to_cbor_hex()}")

    submitted = client.submit_transaction(config, signed_tx.to_cbor_hex())
    show_tx(config, submitted["transaction_id"])
    return signed_tx


if __name__ == "__main__":
    fire.Fire(main)
