"""
Thin client for the Blockdaemon staking API (stake intents, transaction submission)
and the transaction lifecycle API (derive signing payload, compile and send).
"""
from typing import Optional

import requests

from .errors import BlockdaemonApiError
from .network import ChainConfig

TIMEOUT = 30


class StakingApiClient:
    def __init__(
        self,
        stake_api_key: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.stake_api_key = stake_api_key
        self.api_key = api_key
        self.session = session or requests.Session()

    def _stake_headers(self, idempotency_key=None):
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-API-Key": self.stake_api_key,
        }
        if idempotency_key is not None:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    def _bearer_headers(self):
        if not self.api_key:
            raise ValueError("BLOCKDAEMON_API_KEY is required for this request")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    @staticmethod
    def _json(response: requests.Response):
        try:
            body = response.json()
        except ValueError:
            body = response.text
        if response.status_code != 200:
            raise BlockdaemonApiError(response.status_code, body)
        return body

    def _post(self, url, body, headers):
        return self._json(
            self.session.post(url, json=body, headers=headers, timeout=TIMEOUT)
        )

    def create_stake_intent(
        self, config: ChainConfig, request: dict, idempotency_key: str = None
    ) -> dict:
        response = self._post(
            f"{config.stake_api_url}/stake-intents",
            request,
            self._stake_headers(idempotency_key),
        )
        return protocol_section(response, config.chain)

    def submit_transaction(self, config: ChainConfig, signed_transaction: str) -> dict:
        return self._post(
            f"{config.stake_api_url}/transaction-submission",
            {"signed_transaction": signed_transaction},
            self._stake_headers(),
        )

    def bond_extra(self, config: ChainConfig, request: dict) -> dict:
        response = self._post(
            f"{config.stake_api_url}/bond-extra", request, self._stake_headers()
        )
        return protocol_section(response, config.chain)

    def derive_signing_payload(
        self, config: ChainConfig, unsigned_tx: str, sender: str
    ) -> dict:
        return self._post(
            f"{config.tx_api_url}/derive_signing_payload",
            {"unsigned_tx": unsigned_tx, "sender_address": sender},
            self._bearer_headers(),
        )

    def compile_and_send(self, config: ChainConfig, body: dict) -> dict:
        return self._post(
            f"{config.tx_api_url}/compile_and_send", body, self._bearer_headers()
        )

    def get_cosmos_account(self, config: ChainConfig, address: str) -> dict:
        url = f"{config.node_endpoint()}/cosmos/auth/v1beta1/accounts/{address}"
        response = self._json(
            self.session.get(url, headers=self._bearer_headers(), timeout=TIMEOUT)
        )
        return response["account"]


def protocol_section(response: dict, protocol: str) -> dict:
    if not isinstance(response, dict):
        raise BlockdaemonApiError(200, f"Unexpected Blockdaemon response: {response}")
    if not response.get(protocol):
        raise BlockdaemonApiError(
            200, f"Missing property `{protocol}` in Blockdaemon response"
        )
    return response
