from types import SimpleNamespace

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.transaction import Transaction

from staking_examples.solana import stake, transfer
from staking_examples.solana.util import (
    LAMPORTS_PER_SOL,
    attach_signature,
    check_balance,
    decode_transaction,
    message_to_sign,
)
from staking_examples.utils import (
    InsufficientFundsError,
    SigningError,
    ValidatorNotFoundError,
)

FEE = 5000


class FakeClient:
    def __init__(self, balance=5 * LAMPORTS_PER_SOL, validators=()):
        self.balance = balance
        self.validators = list(validators)
        self.sent = []
        self.confirmed = []

    def get_balance(self, address):
        return SimpleNamespace(value=self.balance)

    def get_fee_for_message(self, message):
        return SimpleNamespace(value=FEE)

    def get_vote_accounts(self, commitment=None):
        current = [SimpleNamespace(vote_pubkey=v) for v in self.validators]
        return SimpleNamespace(value=SimpleNamespace(current=current, delinquent=[]))

    def get_latest_blockhash(self):
        return SimpleNamespace(value=SimpleNamespace(blockhash=Hash.default()))

    def send_raw_transaction(self, txn, opts=None):
        tx = Transaction.from_bytes(txn)
        self.sent.append(tx)
        return SimpleNamespace(value=tx.signatures[0])

    def confirm_transaction(self, signature, commitment=None):
        self.confirmed.append(signature)


def keypair_signer(keypair):
    def sign(message):
        signature = keypair.sign_message(bytes.fromhex(message.content))
        return bytes(keypair.pubkey()).hex(), bytes(signature).hex()

    return sign


def unsigned_transfer(keypair, lamports=LAMPORTS_PER_SOL):
    return transfer.build_transfer(
        keypair.pubkey(), Keypair().pubkey(), lamports, Hash.default()
    )


def test_attach_signature():
    keypair = Keypair()
    tx = decode_transaction(bytes(unsigned_transfer(keypair)).hex())
    signature = keypair.sign_message(message_to_sign(tx))
    signed = attach_signature(tx, keypair.pubkey(), bytes(signature).hex())
    assert signed.signatures[0] == signature
    assert all(signed.verify_with_results())


def test_attach_signature_rejects_foreign_signer():
    keypair = Keypair()
    tx = unsigned_transfer(keypair)
    with pytest.raises(SigningError):
        attach_signature(tx, Keypair().pubkey(), "00" * 64)


def test_attach_signature_rejects_bad_signature():
    keypair = Keypair()
    tx = unsigned_transfer(keypair)
    bad = Keypair().sign_message(message_to_sign(tx))
    with pytest.raises(SigningError):
        attach_signature(tx, keypair.pubkey(), bytes(bad).hex())


def test_check_balance():
    keypair = Keypair()
    tx = unsigned_transfer(keypair)
    client = FakeClient(balance=LAMPORTS_PER_SOL + FEE)
    assert check_balance(client, keypair.pubkey(), tx, LAMPORTS_PER_SOL) == LAMPORTS_PER_SOL + FEE
    with pytest.raises(InsufficientFundsError):
        check_balance(client, keypair.pubkey(), tx, LAMPORTS_PER_SOL + 1)


def test_check_validator():
    validator = Keypair().pubkey()
    client = FakeClient(validators=[validator])
    stake.check_validator(client, str(validator))
    with pytest.raises(ValidatorNotFoundError):
        stake.check_validator(client, str(Keypair().pubkey()))


@pytest.fixture
def solana_env(staking_env):
    staking_env.setenv("SOLANA_NETWORK", "devnet")
    return staking_env


def test_stake_main(solana_env, fake_fireblocks, fake_session, patch_script, capsys):
    keypair = Keypair()
    validator = Keypair().pubkey()
    solana_env.setenv("SOLANA_VALIDATOR_ADDRESS", str(validator))
    solana_env.setenv("PLAN_ID", "plan-sol")
    client = FakeClient(validators=[validator])
    solana_env.setattr(stake, "Client", lambda endpoint, commitment=None: client)
    fireblocks = fake_fireblocks(
        addresses={"SOL_TEST": str(keypair.pubkey())}, signer=keypair_signer(keypair)
    )
    session = fake_session(
        {
            "/stake-intents": {
                "stake_intent_id": "si-sol",
                "solana": {
                    "amount": str(LAMPORTS_PER_SOL),
                    "stake_account_public_key": str(Keypair().pubkey()),
                    "unsigned_transaction": bytes(unsigned_transfer(keypair)).hex(),
                },
            }
        }
    )
    patch_script(stake, fireblocks, session)

    tx_id = stake.main()

    assert session.posted("/stake-intents")[0][2] == {
        "amount": str(LAMPORTS_PER_SOL),
        "validator_address": str(validator),
        "delegator_address": str(keypair.pubkey()),
        "plan_id": "plan-sol",
    }
    assert fireblocks.created[0]["raw_message"].algorithm == "MPC_EDDSA_ED25519"
    (sent,) = client.sent
    assert all(sent.verify_with_results())
    assert tx_id == str(sent.signatures[0])
    assert client.confirmed == [sent.signatures[0]]
    assert f"explorer.solana.com/tx/{tx_id}?cluster=devnet" in capsys.readouterr().out


def test_stake_main_unknown_validator(solana_env, fake_fireblocks, patch_script):
    keypair = Keypair()
    solana_env.setenv("SOLANA_VALIDATOR_ADDRESS", str(Keypair().pubkey()))
    solana_env.setattr(stake, "Client", lambda endpoint, commitment=None: FakeClient())
    fireblocks = fake_fireblocks(addresses={"SOL_TEST": str(keypair.pubkey())})
    patch_script(stake, fireblocks)
    with pytest.raises(ValidatorNotFoundError):
        stake.main()
    assert fireblocks.created == []


def test_transfer_main(staking_env, fake_fireblocks, patch_script):
    keypair = Keypair()
    staking_env.setenv("FIREBLOCKS_DELEGATOR_PUBLICKEY", str(keypair.pubkey()))
    client = FakeClient()
    staking_env.setattr(transfer, "Client", lambda endpoint, commitment=None: client)
    patch_script(transfer, fake_fireblocks(signer=keypair_signer(keypair)))

    tx_id = transfer.main(amount=1000)

    (sent,) = client.sent
    assert tx_id == str(sent.signatures[0])
    assert all(sent.verify_with_results())
    assert sent.message.account_keys[0] == keypair.pubkey()


def test_transfer_main_without_funds(staking_env, fake_fireblocks, patch_script, capsys):
    keypair = Keypair()
    staking_env.setenv("FIREBLOCKS_DELEGATOR_PUBLICKEY", str(keypair.pubkey()))
    client = FakeClient(balance=0)
    staking_env.setattr(transfer, "Client", lambda endpoint, commitment=None: client)
    fireblocks = fake_fireblocks()
    patch_script(transfer, fireblocks)

    assert transfer.main() is None
    assert client.sent == []
    assert fireblocks.created == []
    assert "Insufficient funds" in capsys.readouterr().out
