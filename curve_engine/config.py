"""Application configuration."""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # JSON-RPC endpoint (Abstract testnet by default)
    rpc_url: str = "https://api.testnet.abs.xyz"

    # Seconds to wait for a submitted transaction to be mined
    receipt_timeout_seconds: float = 120.0

    # Trade history scans this many blocks back from the chain head
    history_window_blocks: int = 10_000

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            rpc_url=os.getenv("RPC_URL", "https://api.testnet.abs.xyz"),
            receipt_timeout_seconds=float(os.getenv("RECEIPT_TIMEOUT_SECONDS", "120")),
            history_window_blocks=int(os.getenv("HISTORY_WINDOW_BLOCKS", "10000")),
        )
