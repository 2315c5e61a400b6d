"""Foundry toolchain (anvil, cast, forge) exposed over MCP."""
__version__ = "0.1.0"
