import base64

import fire
from algosdk import encoding, transaction
from algosdk.v2client.algod import AlgodClient

from staking_examples.utils import load_env, require_env, get_chain_config, show_tx
from staking_examples.utils.config import FIREBLOCKS_ENV
from staking_examples.utils.fireblocks import (
    get_fireblocks,
    get_vault_address,
    sign_raw_message,
)

# algonode does not check the token
ALGOD_TOKEN = "a" * 64
CONFIRMATION_ROUNDS = 4
ALGORAND_ENV = (
    "ALGORAND_NETWORK",
    "ALGORAND_VOTE_KEY",
    "ALGORAND_SELECTION_KEY",
    "ALGORAND_STATE_PROOF_KEY",
    "ALGORAND_VOTE_FIRST",
    "ALGORAND_VOTE_LAST",
    "ALGORAND_VOTE_KEY_DILUTION",
)


def build_keyreg_txn(
    sender: str,
    sp: transaction.SuggestedParams,
    vote_key: str,
    selection_key: str,
    state_proof_key: str,
    vote_first: int,
    vote_last: int,
    vote_key_dilution: int,
) -> transaction.KeyregOnlineTxn:
    return transaction.KeyregOnlineTxn(
        sender=sender,
        sp=sp,
        votekey=vote_key,
        selkey=selection_key,
        votefst=vote_first,
        votelst=vote_last,
        votekd=vote_key_dilution,
        sprfkey=state_proof_key,
    )


def bytes_to_sign(txn: transaction.Transaction) -> bytes:
    return b"TX" + base64.b64decode(encoding.msgpack_encode(txn))


def attach_signature(
    txn: transaction.Transaction, signature_hex: str
) -> transaction.SignedTransaction:
    signature = base64.b64encode(bytes.fromhex(signature_hex)).decode()
    return transaction.SignedTransaction(txn, signature)


def main(network: str = None, confirmation_rounds: int = CONFIRMATION_ROUNDS):
    load_env()
    env = require_env(*FIREBLOCKS_ENV, *ALGORAND_ENV)
    config = get_chain_config("algorand", network or env["ALGORAND_NETWORK"])
    vault_account_id = env["FIREBLOCKS_VAULT_ACCOUNT_ID"]

    fireblocks = get_fireblocks()
    delegator_address = get_vault_address(
        fireblocks, vault_account_id, config.asset_id
    )
    print(f"Algorand address: {delegator_address}\n")

    algod = AlgodClient(ALGOD_TOKEN, config.node_endpoint())
    account_info = algod.account_info(delegator_address)
    print(f"Account balance: {account_info['amount']} microAlgos")

    txn = build_keyreg_txn(
        delegator_address,
        algod.suggested_params(),
        vote_key=env["ALGORAND_VOTE_KEY"],
        selection_key=env["ALGORAND_SELECTION_KEY"],
        state_proof_key=env["ALGORAND_STATE_PROOF_KEY"],
        vote_first=int(env["ALGORAND_VOTE_FIRST"]),
        vote_last=int(env["ALGORAND_VOTE_LAST"]),
        vote_key_dilution=int(env["ALGORAND_VOTE_KEY_DILUTION"]),
    )
    message = bytes_to_sign(txn).hex()
    print(f"Bytes to sign: {message}")

    signed = sign_raw_message(
        fireblocks,
        vault_account_id,
        config.asset_id,
        message,
        note=f"Algorand online key registration for vault account {vault_account_id}",
    )
    print(f"Signature: {signed.signature}")

    stxn = attach_signature(txn, signed.signature)
    tx_id = algod.send_transaction(stxn)
    result = transaction.wait_for_confirmation(algod, tx_id, confirmation_rounds)
    print(f"Confirmed in round {result.get('confirmed-round')}")
    show_tx(config, tx_id)
    return tx_id


if __name__ == "__main__":
    fire.Fire(main)
