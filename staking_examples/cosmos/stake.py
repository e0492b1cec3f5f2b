import fire

from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.encoding import hex_to_base64
from staking_examples.utils.fireblocks import (
    get_fireblocks,
    get_vault_address,
    sign_raw_message,
)

# SIGN_MODE_DIRECT
SIGN_MODE = 1
MINIMUM_AMOUNT = "1000000"


def compile_and_send_body(
    unsigned_tx: str, signature_hex: str, public_key: str, sequence: int
) -> dict:
    return {
        "signatures": [
            {
                "sequence": sequence,
                "sign_mode": SIGN_MODE,
                "signature": hex_to_base64(signature_hex),
                "public_key": public_key,
            }
        ],
        "unsigned_tx": unsigned_tx,
    }


def main(amount: str = MINIMUM_AMOUNT):
    """
    Delegate ATOM (amount in uatom) to the Blockdaemon validator.
    """
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV, "BLOCKDAEMON_STAKE_API_KEY", "BLOCKDAEMON_API_KEY"
    )
    config = get_chain_config("cosmos", "mainnet")
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    delegator_address = get_vault_address(
        fireblocks, vault_account_id, config.asset_id
    )
    print(f"Cosmos address: {delegator_address}\n")

    client = StakingApiClient(
        env["BLOCKDAEMON_STAKE_API_KEY"], env["BLOCKDAEMON_API_KEY"]
    )
    account = client.get_cosmos_account(config, delegator_address)
    public_key = account["pub_key"]["key"]
    print(f"Sequence: {account['sequence']}")

    intent = client.create_stake_intent(
        config,
        {
            "public_key": {"type": "secp256k1", "value": public_key},
            "amount": str(amount),
            "delegator_address": delegator_address,
        },
    )
    cosmos = intent["cosmos"]
    print(f"Stake intent: {intent['stake_intent_id']}")

    signed = sign_raw_message(
        fireblocks,
        vault_account_id,
        config.asset_id,
        cosmos["hex_transaction"]["transaction_hash"],
        note=f"Cosmos stake intent {intent['stake_intent_id']}",
    )

    result = client.compile_and_send(
        config,
        compile_and_send_body(
            cosmos["unsigned_transaction"],
            signed.signature,
            public_key,
            int(account["sequence"]),
        ),
    )
    print(f"Transaction sent successfully: {result}")
    if result.get("id"):
        show_tx(config, result["id"])
    return result


if __name__ == "__main__":
    fire.Fire(main)
