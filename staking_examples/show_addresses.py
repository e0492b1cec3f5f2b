import click
from fireblocks_sdk import FireblocksApiException

from staking_examples.utils import AddressNotFoundError, load_env
from staking_examples.utils.fireblocks import (
    get_fireblocks,
    get_vault_account_id,
    get_vault_address,
)
from staking_examples.utils.network import CHAINS, DEFAULT_TESTNETS, get_chain_config


def vault_addresses(fireblocks, vault_account_id, testnet=True):
    for chain in CHAINS:
        config = get_chain_config(chain, DEFAULT_TESTNETS[chain] if testnet else "mainnet")
        try:
            address = get_vault_address(fireblocks, vault_account_id, config.asset_id)
        except (AddressNotFoundError, FireblocksApiException):
            address = None
        yield config, address


@click.command()
@click.option("--testnet/--mainnet", default=True)
def main(testnet):
    """
    Prints the deposit address of every supported chain held by the Fireblocks vault account.
    """
    load_env()
    fireblocks = get_fireblocks()
    vault_account_id = get_vault_account_id()
    for config, address in vault_addresses(fireblocks, vault_account_id, testnet):
        print(f"{config.chain:<10} {config.asset_id:<10} {address or '-'}")


if __name__ == "__main__":
    main()
