import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

from .errors import MissingEnvironmentError

FIREBLOCKS_ENV = (
    "FIREBLOCKS_API_KEY",
    "FIREBLOCKS_SECRET_KEY",
    "FIREBLOCKS_VAULT_ACCOUNT_ID",
)
DEFAULT_FIREBLOCKS_BASE_PATH = "https://api.fireblocks.io"


def load_env(path=None) -> bool:
    """
    Load a .env file into the process environment.
    Variables that are already set take precedence over the file.
    """
    if path is None:
        path = Path.cwd().joinpath(".env")
    return load_dotenv(path, override=False)


def require_env(*names: str) -> Dict[str, str]:
    missing = [name for name in names if not os.getenv(name)]
    if missing:
        raise MissingEnvironmentError(missing)
    return {name: os.environ[name] for name in names}


def fireblocks_base_path() -> str:
    return os.getenv("FIREBLOCKS_BASE_PATH") or DEFAULT_FIREBLOCKS_BASE_PATH


def read_secret_key(path) -> str:
    path = Path(path)
    if not path.is_file():
        raise MissingEnvironmentError([f"FIREBLOCKS_SECRET_KEY (no file at {path})"])
    return path.read_text()
