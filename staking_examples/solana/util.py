from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from staking_examples.utils import InsufficientFundsError, SigningError
from staking_examples.utils.fireblocks import EDDSA_ALGORITHM, sign_raw_message

LAMPORTS_PER_SOL = 1_000_000_000


def decode_transaction(unsigned_transaction_hex: str) -> Transaction:
    return Transaction.from_bytes(bytes.fromhex(unsigned_transaction_hex))


def message_to_sign(tx: Transaction) -> bytes:
    return bytes(tx.message)


def attach_signature(tx: Transaction, signer: Pubkey, signature_hex: str) -> Transaction:
    num_signers = tx.message.header.num_required_signatures
    signers = list(tx.message.account_keys[:num_signers])
    if signer not in signers:
        raise SigningError(f"{signer} is not a required signer of the transaction")
    signatures = list(tx.signatures)
    if len(signatures) < num_signers:
        signatures += [Signature.default()] * (num_signers - len(signatures))
    signatures[signers.index(signer)] = Signature.from_bytes(
        bytes.fromhex(signature_hex)
    )
    signed = Transaction.populate(tx.message, signatures)
    if not all(signed.verify_with_results()):
        raise SigningError("Failed to verify signatures")
    return signed


def sign_transaction(
    fireblocks, vault_account_id: str, asset_id: str, tx: Transaction, signer: Pubkey
) -> Transaction:
    message = message_to_sign(tx)
    signed = sign_raw_message(
        fireblocks,
        vault_account_id,
        asset_id,
        message.hex(),
        algorithm=EDDSA_ALGORITHM,
        note=f"Solana transaction signed by {signer}",
    )
    return attach_signature(tx, signer, signed.signature)


def check_balance(client: Client, address: Pubkey, tx: Transaction, amount: int) -> int:
    balance = client.get_balance(address).value
    fee = client.get_fee_for_message(tx.message).value
    if fee is None:
        raise ValueError("Failed to estimate fee")
    if balance < amount + fee:
        raise InsufficientFundsError(
            f"Insufficient funds: {address} Balance: {balance}, Required: {amount + fee}"
        )
    return balance


def broadcast(client: Client, tx: Transaction):
    signature = client.send_raw_transaction(
        bytes(tx), opts=TxOpts(preflight_commitment=Confirmed)
    ).value
    client.confirm_transaction(signature, commitment=Confirmed)
    return str(signature)
