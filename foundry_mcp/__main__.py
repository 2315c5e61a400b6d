#!/usr/bin/env python3
"""
Run the Foundry MCP server.
Transport comes from FOUNDRY_MCP_TRANSPORT: stdio (default) or streamable-http.
"""
import logging

from dotenv import load_dotenv

from .config import FoundryConfig
from .server import create_server

logger = logging.getLogger("foundry_mcp")


def main() -> None:
    load_dotenv()
    config = FoundryConfig.from_env()
    logging.basicConfig(level=config.log_level)
    mcp = create_server(config)
    if config.transport == "stdio":
        logger.info("Starting foundry MCP server on stdio (workspace %s)", config.workspace)
        mcp.run("stdio")
    else:
        logger.info("Starting foundry MCP server on http://%s:%s/mcp", config.host, config.port)
        mcp.run(config.transport)


if __name__ == "__main__":
    main()
