"""
PassVault - Configuration

Settings are plain module constants, with a couple of environment
variable overrides for the database location and log verbosity:

    PASSVAULT_DB         Path to the SQLite document store
    PASSVAULT_LOG_LEVEL  DEBUG / INFO / WARNING / ERROR (default WARNING)
"""

import logging
import os


DEFAULT_DB_PATH = os.path.join(os.path.expanduser("~"), ".passvault", "passvault.db")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Collection names in the document store
ACCOUNTS_COLLECTION = "accounts"
USERS_COLLECTION = "users"
CREDENTIALS_COLLECTION = "credentials"

# Minimum account password length accepted by the identity provider
MIN_ACCOUNT_PASSWORD_LENGTH = 6


def get_db_path() -> str:
    """Database path, honouring PASSVAULT_DB."""
    return os.environ.get("PASSVAULT_DB") or DEFAULT_DB_PATH


def get_log_level() -> int:
    name = os.environ.get("PASSVAULT_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging() -> None:
    """Set up root logging for the interactive front end."""
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
