# =============================================================================
# core/config.py  —  Process Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the handful of settings the server needs ONCE at startup and
#   freezes them into a StoreConfig.  The adapter receives this object
#   explicitly; nothing else in the code reads os.environ.
#
# ENVIRONMENT VARIABLES:
#   CONNECTION_STRING                 Azure Storage connection string
#   AZURE_STORAGE_CONNECTION_STRING   fallback name for the same value
#   LOG_LEVEL                         logging level (default "INFO")
#
#   With no connection string at all we fall back to the Azurite local
#   emulator sentinel, "UseDevelopmentStorage=true".
#
#   A .env file in the working directory is loaded first (python-dotenv),
#   so local development doesn't need exported variables.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

DEVELOPMENT_STORAGE = "UseDevelopmentStorage=true"


@dataclass(frozen=True)
class StoreConfig:
    """Immutable settings shared by every tool call."""

    # Kept out of repr() so the account key never ends up in a log line.
    connection_string: str = field(default=DEVELOPMENT_STORAGE, repr=False)
    log_level: str = "INFO"

    @property
    def uses_development_storage(self) -> bool:
        return self.connection_string.strip().lower() == DEVELOPMENT_STORAGE.lower()


def load_config(environ: Optional[Mapping[str, str]] = None) -> StoreConfig:
    """Build the StoreConfig from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests pass a dict).
            When omitted, a .env file is loaded into os.environ first.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    connection_string = (
        environ.get("CONNECTION_STRING")
        or environ.get("AZURE_STORAGE_CONNECTION_STRING")
        or DEVELOPMENT_STORAGE
    )
    return StoreConfig(
        connection_string=connection_string,
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
    )
