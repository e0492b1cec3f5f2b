import fire

from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.encoding import strip_0x
from staking_examples.utils.fireblocks import (
    get_fireblocks,
    get_vault_address,
    sign_raw_message,
)


def main(network: str = None):
    """
    First bond of a Polkadot account through a Blockdaemon stake intent.
    Use bond_extra to top up an account that is already bonded.
    """
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV,
        "BLOCKDAEMON_STAKE_API_KEY",
        "BLOCKDAEMON_API_KEY",
        "POLKADOT_NETWORK",
    )
    config = get_chain_config("polkadot", network or env["POLKADOT_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    sender = get_vault_address(fireblocks, vault_account_id, config.asset_id)
    print(f"Polkadot address: {sender}\n")

    client = StakingApiClient(
        env["BLOCKDAEMON_STAKE_API_KEY"], env["BLOCKDAEMON_API_KEY"]
    )
    print("Fetching unsigned transaction from Blockdaemon...")
    intent = client.create_stake_intent(config, {"customer_address": sender})
    print(f"Blockdaemon Response: {intent}")
    unsigned_transaction = intent["polkadot"]["unsigned_transaction"]

    derived = client.derive_signing_payload(config, unsigned_transaction, sender)
    signed = sign_raw_message(
        fireblocks,
        vault_account_id,
        config.asset_id,
        strip_0x(derived["signing_payload"]),
        note=f"Polkadot stake intent {intent.get('stake_intent_id')}",
    )
    print(f"Fireblocks Signature: {signed.signature}")

    result = client.compile_and_send(
        config,
        {
            "unsigned_tx": derived["unsigned_tx"],
            "signature": signed.signature,
            "public_key": signed.public_key,
        },
    )
    print(f"Transaction sent successfully: {result}")
    if result.get("id"):
        show_tx(config, result["id"])
    return result


if __name__ == "__main__":
    fire.Fire(main)
