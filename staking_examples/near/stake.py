import os

import fire
from solders.pubkey import Pubkey

from staking_examples.utils import (
    load_env,
    require_env,
    get_chain_config,
    show_tx,
    SigningError,
    MissingEnvironmentError,
)
from staking_examples.utils.blockdaemon import StakingApiClient
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.encoding import hex_to_base64
from staking_examples.utils.fireblocks import (
    get_fireblocks,
    get_vault_address,
    sign_raw_message,
)

ED25519_SIGNATURE_LENGTH = 64
ED25519_PREFIX = "ed25519:"
DEFAULT_POOL = "colossus.pool.f863973.m0"
# 1 NEAR in yoctoNEAR
DEFAULT_AMOUNT = "1000000000000000000000000"


def check_signature(signature_hex: str) -> str:
    if len(bytes.fromhex(signature_hex)) != ED25519_SIGNATURE_LENGTH:
        raise SigningError(
            "Invalid signature length: Ed25519 signatures must be exactly 64 bytes."
        )
    return signature_hex


def check_public_key(public_key: str, signed_public_key_hex: str):
    """
    The stake intent is built for public_key (ed25519:<base58>); refuse a signature
    made by any other vault key.
    """
    if not public_key.startswith(ED25519_PREFIX):
        raise SigningError(f"Expected an {ED25519_PREFIX} public key, got {public_key}")
    expected = bytes(Pubkey.from_string(public_key[len(ED25519_PREFIX) :]))
    if expected != bytes.fromhex(signed_public_key_hex):
        raise SigningError("Public key mismatch! Fireblocks signed with a different key.")


def main(
    amount: str = DEFAULT_AMOUNT,
    pool: str = DEFAULT_POOL,
    public_key: str = None,
    network: str = None,
):
    """
    Stake NEAR with a validator pool.
    public_key is the ed25519:... access key of the vault account, see NEAR_PUBLIC_KEY.
    """
    load_env()
    env = require_env(
        *FIREBLOCKS_ENV,
        "BLOCKDAEMON_STAKE_API_KEY",
        "BLOCKDAEMON_API_KEY",
        "NEAR_NETWORK",
    )
    public_key = public_key or os.getenv("NEAR_PUBLIC_KEY")
    if not public_key:
        raise MissingEnvironmentError(["NEAR_PUBLIC_KEY"])
    config = get_chain_config("near", network or env["NEAR_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    wallet_address = get_vault_address(fireblocks, vault_account_id, config.asset_id)
    print(f"Near address: {wallet_address}\n")

    client = StakingApiClient(
        env["BLOCKDAEMON_STAKE_API_KEY"], env["BLOCKDAEMON_API_KEY"]
    )
    intent = client.create_stake_intent(
        config,
        {
            "wallet_address": wallet_address,
            "public_key": public_key,
            "amount": str(amount),
            "to": pool,
        },
    )
    near = intent["near"]

    signed = sign_raw_message(
        fireblocks,
        vault_account_id,
        config.asset_id,
        near["unsigned_transaction_hash"],
        note=f"Near stake of {amount} yocto to {pool}",
    )
    print(f"Fireblocks Signed Public Key: {signed.public_key}")
    check_public_key(public_key, signed.public_key)

    result = client.compile_and_send(
        config,
        {
            "signature": check_signature(signed.signature),
            "unsigned_tx": hex_to_base64(near["unsigned_transaction"]),
        },
    )
    print(f"Transaction sent successfully: {result}")
    if result.get("id"):
        show_tx(config, result["id"])
    return result


if __name__ == "__main__":
    fire.Fire(main)
