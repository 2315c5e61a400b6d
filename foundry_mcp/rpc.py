"""
rpc.py
Turns an optional RPC URL or endpoint alias into a concrete URL.
Aliases come from the [rpc_endpoints] table of the workspace foundry.toml.
"""
import logging
import os
import re
from pathlib import Path
from typing import Optional

from .config import DEFAULT_RPC_URL

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http://", "https://", "ws://", "wss://", "ipc://")
_SECTION_RE = re.compile(r"^\[rpc_endpoints\][ \t]*$(.*?)(?=^\[|\Z)", re.MULTILINE | re.DOTALL)


def looks_like_url(value: str) -> bool:
    return value.lower().startswith(URL_SCHEMES) or value.endswith(".ipc")


class RpcUrlResolver:
    def __init__(self, config_file: Path, default_url: Optional[str] = None):
        self.config_file = config_file
        self.default_url = default_url or DEFAULT_RPC_URL

    def resolve(self, rpc_url: Optional[str] = None) -> str:
        if not rpc_url:
            return self.default_url
        if looks_like_url(rpc_url):
            return rpc_url
        url = self.lookup_alias(rpc_url)
        return url if url else rpc_url

    def lookup_alias(self, alias: str) -> Optional[str]:
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("no alias table at %s: %s", self.config_file, e)
            return None
        section = _SECTION_RE.search(text)
        if not section:
            return None
        entry = re.search(
            r"^[ \t]*" + re.escape(alias) + r"[ \t]*=[ \t]*[\"']([^\"']+)[\"']",
            section.group(1),
            re.MULTILINE,
        )
        if not entry:
            return None
        # foundry.toml endpoints may reference env vars as ${NAME}
        return os.path.expandvars(entry.group(1))
