import time
from typing import List, NamedTuple, Optional, Sequence

from fireblocks_sdk import (
    FireblocksSDK,
    TransferPeerPath,
    DestinationTransferPeerPath,
    RawMessage,
    UnsignedMessage,
    VAULT_ACCOUNT,
    ONE_TIME_ADDRESS,
    CONTRACT_CALL,
    TRANSACTION_STATUS_COMPLETED,
    TRANSACTION_STATUS_BLOCKED,
    TRANSACTION_STATUS_CANCELLED,
    TRANSACTION_STATUS_FAILED,
    TRANSACTION_STATUS_REJECTED,
)

from .config import FIREBLOCKS_ENV, fireblocks_base_path, read_secret_key, require_env
from .errors import AddressNotFoundError, SigningError

POLL_INTERVAL = 3
FAILED_STATUSES = (
    TRANSACTION_STATUS_BLOCKED,
    TRANSACTION_STATUS_CANCELLED,
    TRANSACTION_STATUS_FAILED,
    TRANSACTION_STATUS_REJECTED,
)
EDDSA_ALGORITHM = "MPC_EDDSA_ED25519"


class SignedMessage(NamedTuple):
    public_key: str
    signature: str


def get_fireblocks() -> FireblocksSDK:
    env = require_env(*FIREBLOCKS_ENV)
    return FireblocksSDK(
        read_secret_key(env["FIREBLOCKS_SECRET_KEY"]),
        env["FIREBLOCKS_API_KEY"],
        api_base_url=fireblocks_base_path(),
    )


def get_vault_account_id() -> str:
    return require_env("FIREBLOCKS_VAULT_ACCOUNT_ID")["FIREBLOCKS_VAULT_ACCOUNT_ID"]


def get_vault_address(fireblocks, vault_account_id: str, asset_id: str) -> str:
    addresses = fireblocks.get_deposit_addresses(vault_account_id, asset_id)
    if not addresses or not addresses[0].get("address"):
        raise AddressNotFoundError(
            f"{asset_id} address not found (vault id: {vault_account_id})"
        )
    return addresses[0]["address"]


def wait_for_transaction(fireblocks, tx_id: str, poll_interval: float = POLL_INTERVAL):
    """
    Poll a Fireblocks transaction until it completes.
    Raises SigningError once the transaction ends up blocked, cancelled, failed or rejected.
    """
    tx = fireblocks.get_transaction_by_id(tx_id)
    print(f"Transaction {tx['id']} is currently at status - {tx['status']}")
    while tx["status"] != TRANSACTION_STATUS_COMPLETED:
        time.sleep(poll_interval)
        tx = fireblocks.get_transaction_by_id(tx_id)
        if tx["status"] in FAILED_STATUSES:
            raise SigningError(
                f"Signing request failed/blocked/cancelled: "
                f"Transaction: {tx['id']} status is {tx['status']}"
            )
        print(f"Transaction {tx['id']} is currently at status - {tx['status']}")
    return tx


def signed_messages_of(tx: dict) -> List[SignedMessage]:
    signed = tx.get("signedMessages") or []
    result = []
    for msg in signed:
        full_sig = (msg.get("signature") or {}).get("fullSig")
        if not full_sig:
            raise SigningError(f"Missing signature in transaction {tx.get('id')}")
        result.append(SignedMessage(msg.get("publicKey"), full_sig))
    if not result:
        raise SigningError(f"No signed messages in transaction {tx.get('id')}")
    return result


def sign_raw_messages(
    fireblocks,
    vault_account_id: str,
    asset_id: str,
    messages: Sequence[UnsignedMessage],
    algorithm: Optional[str] = None,
    note: str = "",
    poll_interval: float = POLL_INTERVAL,
) -> List[SignedMessage]:
    res = fireblocks.create_raw_transaction(
        raw_message=RawMessage(list(messages), algorithm),
        source=TransferPeerPath(VAULT_ACCOUNT, vault_account_id),
        asset_id=asset_id,
        note=note,
    )
    tx_id = res.get("id")
    if not tx_id:
        raise SigningError("Transaction ID is undefined.")
    print(f"Created Fireblocks transaction: {tx_id}")
    tx = wait_for_transaction(fireblocks, tx_id, poll_interval=poll_interval)
    return signed_messages_of(tx)


def sign_raw_message(
    fireblocks,
    vault_account_id: str,
    asset_id: str,
    content: str,
    algorithm: Optional[str] = None,
    note: str = "",
    poll_interval: float = POLL_INTERVAL,
) -> SignedMessage:
    return sign_raw_messages(
        fireblocks,
        vault_account_id,
        asset_id,
        [UnsignedMessage(content)],
        algorithm=algorithm,
        note=note,
        poll_interval=poll_interval,
    )[0]


def contract_call(
    fireblocks,
    vault_account_id: str,
    asset_id: str,
    contract_address: str,
    amount: str,
    call_data: str,
    note: str = "",
    poll_interval: float = POLL_INTERVAL,
) -> dict:
    res = fireblocks.create_transaction(
        asset_id=asset_id,
        amount=amount,
        source=TransferPeerPath(VAULT_ACCOUNT, vault_account_id),
        destination=DestinationTransferPeerPath(
            ONE_TIME_ADDRESS, one_time_address={"address": contract_address}
        ),
        tx_type=CONTRACT_CALL,
        note=note,
        extra_parameters={"contractCallData": call_data},
    )
    tx_id = res.get("id")
    if not tx_id:
        raise SigningError("Transaction ID is undefined.")
    print(f"Created Fireblocks transaction: {tx_id}")
    return wait_for_transaction(fireblocks, tx_id, poll_interval=poll_interval)
