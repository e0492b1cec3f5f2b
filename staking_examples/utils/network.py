import dataclasses
from typing import Dict, Optional, Tuple

STAKE_API_BASE_URL = "https://svc.blockdaemon.com/boss/v1"
TX_API_BASE_URL = "https://svc.blockdaemon.com/tx/v1"
NATIVE_API_BASE_URL = "https://svc.blockdaemon.com"


@dataclasses.dataclass(frozen=True)
class ChainConfig:
    chain: str
    network: str
    asset_id: str
    explorer_tx_url: str
    # may contain an {api_key} placeholder
    node_url: Optional[str] = None

    @property
    def stake_api_url(self) -> str:
        return f"{STAKE_API_BASE_URL}/{self.chain}/{self.network}"

    @property
    def tx_api_url(self) -> str:
        return f"{TX_API_BASE_URL}/{self.chain}-{self.network}"

    def node_endpoint(self, api_key: str = "") -> str:
        if self.node_url is None:
            raise ValueError(f"No node endpoint configured for {self.chain}")
        return self.node_url.format(api_key=api_key)

    def explorer_link(self, tx_id: str) -> str:
        return self.explorer_tx_url.format(tx_id)


_CHAINS: Dict[Tuple[str, str], ChainConfig] = {
    (c.chain, c.network): c
    for c in [
        ChainConfig(
            "algorand",
            "mainnet",
            "ALGO",
            "https://allo.info/tx/{}",
            "https://mainnet-api.algonode.cloud",
        ),
        ChainConfig(
            "algorand",
            "testnet",
            "ALGO_TEST",
            "https://testnet.allo.info/tx/{}",
            "https://testnet-api.algonode.cloud",
        ),
        ChainConfig("cardano", "mainnet", "ADA", "https://cexplorer.io/tx/{}"),
        ChainConfig(
            "cardano", "preprod", "ADA_TEST", "https://preprod.cexplorer.io/tx/{}"
        ),
        ChainConfig(
            "cardano", "preview", "ADA_TEST", "https://preview.cexplorer.io/tx/{}"
        ),
        ChainConfig(
            "cosmos",
            "mainnet",
            "ATOM_COS",
            "https://www.mintscan.io/cosmos/tx/{}",
            f"{NATIVE_API_BASE_URL}/cosmos/mainnet/native/cosmos-rest",
        ),
        ChainConfig(
            "polkadot", "mainnet", "DOT", "https://polkadot.subscan.io/extrinsic/{}"
        ),
        ChainConfig(
            "polkadot", "westend", "WND", "https://westend.subscan.io/extrinsic/{}"
        ),
        ChainConfig("near", "mainnet", "NEAR", "https://nearblocks.io/txns/{}"),
        ChainConfig(
            "near", "testnet", "NEAR_TEST", "https://testnet.nearblocks.io/txns/{}"
        ),
        ChainConfig(
            "ethereum",
            "mainnet",
            "ETH",
            "https://etherscan.io/tx/{}",
            NATIVE_API_BASE_URL + "/ethereum/mainnet/native?apiKey={api_key}",
        ),
        ChainConfig(
            "ethereum",
            "holesky",
            "ETH_TEST6",
            "https://holesky.etherscan.io/tx/{}",
            NATIVE_API_BASE_URL + "/ethereum/holesky/native?apiKey={api_key}",
        ),
        ChainConfig(
            "solana",
            "mainnet",
            "SOL",
            "https://explorer.solana.com/tx/{}",
            "https://api.mainnet-beta.solana.com",
        ),
        ChainConfig(
            "solana",
            "testnet",
            "SOL_TEST",
            "https://explorer.solana.com/tx/{}?cluster=testnet",
            "https://api.testnet.solana.com",
        ),
        ChainConfig(
            "solana",
            "devnet",
            "SOL_TEST",
            "https://explorer.solana.com/tx/{}?cluster=devnet",
            "https://api.devnet.solana.com",
        ),
    ]
}

CHAINS = sorted({chain for chain, _ in _CHAINS})
DEFAULT_TESTNETS = {
    "algorand": "testnet",
    "cardano": "preprod",
    # no public cosmos testnet on the staking API
    "cosmos": "mainnet",
    "polkadot": "westend",
    "near": "testnet",
    "ethereum": "holesky",
    "solana": "devnet",
}


def supported_networks(chain: str):
    return [network for c, network in _CHAINS if c == chain]


def get_chain_config(chain: str, network: str) -> ChainConfig:
    network = network.lower()
    try:
        return _CHAINS[(chain, network)]
    except KeyError:
        raise ValueError(
            f"Unsupported {chain} network {network!r}, "
            f"expected one of {supported_networks(chain)}"
        ) from None


def show_tx(config: ChainConfig, tx_id: str):
    print(f"transaction id: {tx_id}")
    print(f"Explorer: {config.explorer_link(tx_id)}")
