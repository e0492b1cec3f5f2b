import pytest

from staking_examples.utils import fireblocks as fireblocks_utils
from staking_examples.utils.blockdaemon import StakingApiClient

FIREBLOCKS_VARS = {
    "FIREBLOCKS_API_KEY": "fireblocks-api-key",
    "FIREBLOCKS_SECRET_KEY": "/nonexistent/fireblocks_secret.key",
    "FIREBLOCKS_VAULT_ACCOUNT_ID": "7",
    "BLOCKDAEMON_STAKE_API_KEY": "stake-key",
    "BLOCKDAEMON_API_KEY": "api-key",
}


class FakeFireblocks:
    """
    Scripted stand-in for FireblocksSDK.
    signer maps an UnsignedMessage to a (public key hex, signature hex) pair.
    """

    def __init__(
        self,
        addresses=None,
        statuses=("SUBMITTED", "PENDING_SIGNATURE", "COMPLETED"),
        signer=None,
        tx_hash="0x" + "ab" * 32,
    ):
        self.addresses = addresses or {}
        self.statuses = list(statuses)
        self.signer = signer or (lambda message: ("00" * 32, "11" * 64))
        self.tx_hash = tx_hash
        self.created = []
        self.polls = 0

    def get_deposit_addresses(self, vault_account_id, asset_id):
        if asset_id not in self.addresses:
            return []
        return [{"assetId": asset_id, "address": self.addresses[asset_id]}]

    def create_raw_transaction(self, raw_message, source=None, asset_id=None, note=None):
        self.polls = 0
        self.created.append(
            {
                "type": "RAW",
                "raw_message": raw_message,
                "source": source,
                "asset_id": asset_id,
                "note": note,
            }
        )
        return {"id": f"fb-{len(self.created)}", "status": "SUBMITTED"}

    def create_transaction(self, **kwargs):
        self.polls = 0
        self.created.append(dict(type="CONTRACT_CALL", **kwargs))
        return {"id": f"fb-{len(self.created)}", "status": "SUBMITTED"}

    def get_transaction_by_id(self, txid):
        status = self.statuses[min(self.polls, len(self.statuses) - 1)]
        self.polls += 1
        tx = {"id": txid, "status": status}
        if status != "COMPLETED":
            return tx
        last = self.created[-1]
        if last["type"] == "RAW":
            tx["signedMessages"] = []
            for message in last["raw_message"].messages:
                public_key, signature = self.signer(message)
                tx["signedMessages"].append(
                    {"publicKey": public_key, "signature": {"fullSig": signature}}
                )
        else:
            tx["txHash"] = self.tx_hash
        return tx


class FakeResponse:
    def __init__(self, body=None, status_code=200):
        self.body = body
        self.status_code = status_code

    def json(self):
        if self.body is None:
            raise ValueError("no json body")
        return self.body

    @property
    def text(self):
        return "" if self.body is None else str(self.body)


class FakeSession:
    """
    Routes requests by URL suffix; records every call.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def _respond(self, url):
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                if isinstance(response, FakeResponse):
                    return response
                return FakeResponse(response)
        return FakeResponse({"error": f"no route for {url}"}, status_code=404)

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(("POST", url, json, headers))
        return self._respond(url)

    def get(self, url, headers=None, timeout=None):
        self.calls.append(("GET", url, None, headers))
        return self._respond(url)

    def posted(self, suffix):
        return [c for c in self.calls if c[0] == "POST" and c[1].endswith(suffix)]


@pytest.fixture
def fake_fireblocks(no_sleep):
    return FakeFireblocks


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(fireblocks_utils.time, "sleep", lambda seconds: None)


@pytest.fixture
def staking_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    for name, value in FIREBLOCKS_VARS.items():
        monkeypatch.setenv(name, value)
    for name in (
        "FIREBLOCKS_BASE_PATH",
        "FIREBLOCKS_DELEGATOR_PUBLICKEY",
        "BLOCKFROST_PROJECT_ID",
        "PLAN_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def patch_script(monkeypatch):
    """
    Point a script module at a fake Fireblocks client and a fake HTTP session.
    """

    def patch(module, fireblocks, session=None):
        monkeypatch.setattr(module, "get_fireblocks", lambda: fireblocks)
        if session is not None and hasattr(module, "StakingApiClient"):
            monkeypatch.setattr(
                module,
                "StakingApiClient",
                lambda *args, **kwargs: StakingApiClient(
                    *args, session=session, **kwargs
                ),
            )

    return patch
