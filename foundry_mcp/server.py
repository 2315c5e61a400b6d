"""
server.py
Foundry MCP server: anvil, cast and forge exposed as MCP tools.
"""
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import FoundryConfig
from .executor import CommandExecutor
from .node import NodeMonitor, ProcessRegistry, PsutilProcessRegistry
from .rpc import RpcUrlResolver
from .tools import TOOL_NAMES, FoundryTools
from .workspace import Workspace

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Tools for Solidity developers using the Foundry toolkit: run a local anvil node, "
    "query and transact with cast, and build, test and script contracts with forge "
    "inside a persistent workspace."
)


def build_tools(
    config: FoundryConfig,
    executor: Optional[CommandExecutor] = None,
    registry: Optional[ProcessRegistry] = None,
) -> FoundryTools:
    executor = executor or CommandExecutor()
    workspace = Workspace(config.workspace, config.forge, executor)
    node = NodeMonitor(
        registry or PsutilProcessRegistry(),
        executor,
        start_grace=config.node_start_grace,
        stop_grace=config.node_stop_grace,
    )
    resolver = RpcUrlResolver(workspace.config_file, config.default_rpc_url)
    return FoundryTools(config, executor, node, workspace, resolver)


def create_server(config: FoundryConfig, tools: Optional[FoundryTools] = None) -> FastMCP:
    tools = tools or build_tools(config)
    mcp = FastMCP(
        name="foundry",
        instructions=INSTRUCTIONS,
        host=config.host,
        port=config.port,
        stateless_http=True,
        json_response=True,
    )
    for name in TOOL_NAMES:
        mcp.add_tool(getattr(tools, name), name=name)
    logger.debug("registered %d tools", len(TOOL_NAMES))
    return mcp
