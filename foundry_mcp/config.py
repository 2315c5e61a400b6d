"""
config.py
Runtime configuration for the Foundry MCP server.
Built once at start-up from the environment and handed to every component.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_RPC_URL = "http://localhost:8545"
FOUNDRY_NOT_INSTALLED_ERROR = (
    "Foundry tools are not installed. Please install Foundry: "
    "https://book.getfoundry.sh/getting-started/installation"
)


@dataclass(frozen=True)
class FoundryConfig:
    bin_dir: Path
    workspace: Path
    default_rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    node_start_grace: float = 2.0
    node_stop_grace: float = 1.0
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 7020
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "FoundryConfig":
        env = os.environ if env is None else env
        home = Path.home()
        return cls(
            bin_dir=Path(env.get("FOUNDRY_BIN") or home / ".foundry" / "bin").expanduser(),
            workspace=Path(env.get("FOUNDRY_MCP_WORKSPACE") or home / ".mcp-foundry-workspace").expanduser(),
            default_rpc_url=env.get("ETH_RPC_URL") or DEFAULT_RPC_URL,
            private_key=env.get("PRIVATE_KEY") or None,
            node_start_grace=float(env.get("ANVIL_START_GRACE", "2")),
            node_stop_grace=float(env.get("ANVIL_STOP_GRACE", "1")),
            transport=env.get("FOUNDRY_MCP_TRANSPORT", "stdio"),
            host=env.get("FOUNDRY_MCP_HOST", "127.0.0.1"),
            port=int(env.get("FOUNDRY_MCP_PORT", "7020")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def binary(self, name: str) -> str:
        """Path to a Foundry executable, falling back to a PATH lookup by bare name."""
        candidate = self.bin_dir / name
        if candidate.exists():
            return str(candidate)
        return name

    @property
    def anvil(self) -> str:
        return self.binary("anvil")

    @property
    def cast(self) -> str:
        return self.binary("cast")

    @property
    def forge(self) -> str:
        return self.binary("forge")

    def signing_key(self, explicit: Optional[str] = None) -> Optional[str]:
        """Explicit key wins, then the PRIVATE_KEY credential, else unsigned."""
        return explicit or self.private_key or None
