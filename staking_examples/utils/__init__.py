from .config import load_env, require_env
from .errors import (
    StakingError,
    MissingEnvironmentError,
    AddressNotFoundError,
    SigningError,
    BlockdaemonApiError,
    InsufficientFundsError,
    ValidatorNotFoundError,
)
from .network import ChainConfig, get_chain_config, show_tx
