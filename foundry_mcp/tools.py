"""
tools.py
The MCP tools exposed by the Foundry server.

Each tool checks that Foundry is installed, resolves its inputs, builds one
command, runs it and turns the captured output into text. Failures are raised
as ToolError so FastMCP reports them as error results instead of crashing.
"""
import asyncio
import logging
from typing import List, Literal, Optional

from mcp.server.fastmcp.exceptions import ToolError

from . import commands
from .config import FOUNDRY_NOT_INSTALLED_ERROR, FoundryConfig
from .executor import CommandExecutor
from .node import NodeError, NodeMonitor, is_responding
from .rpc import RpcUrlResolver
from .workspace import Workspace, WorkspaceError

logger = logging.getLogger(__name__)

Verbosity = Literal["v", "vv", "vvv", "vvvv", "vvvvv"]
EthUnit = Literal["wei", "gwei", "ether"]


def _tidy_lines(output: str) -> str:
    if "\n" in output and "Error" not in output:
        return "\n".join(line.strip() for line in output.split("\n") if line.strip())
    return output


def _suffix(field: Optional[str]) -> str:
    return f" ({field})" if field else ""


class FoundryTools:
    def __init__(
        self,
        config: FoundryConfig,
        executor: CommandExecutor,
        node: NodeMonitor,
        workspace: Workspace,
        resolver: RpcUrlResolver,
    ):
        self.config = config
        self.executor = executor
        self.node = node
        self.workspace = workspace
        self.resolver = resolver

    # plumbing

    async def _require_foundry(self) -> None:
        result = await self.executor.run(commands.forge_version(self.config.forge))
        if not result.succeeded:
            logger.warning("forge not available: %s", result.output.strip())
            raise ToolError(FOUNDRY_NOT_INSTALLED_ERROR)

    async def _run(self, argv: List[str], failure: str, cwd: Optional[str] = None) -> str:
        result = await self.executor.run(argv, cwd=cwd)
        if not result.succeeded:
            raise ToolError(f"{failure}: {result.output}")
        return result.output

    async def _workspace_dir(self) -> str:
        try:
            return str(await self.workspace.ensure_initialized())
        except WorkspaceError as e:
            raise ToolError(str(e)) from e

    # anvil

    async def anvil_start(
        self,
        port: Optional[int] = None,
        host: Optional[str] = None,
        block_time: Optional[int] = None,
        fork_url: Optional[str] = None,
        fork_block_number: Optional[int] = None,
        chain_id: Optional[int] = None,
        accounts: Optional[int] = None,
        balance: Optional[int] = None,
    ) -> str:
        """Start a local anvil node in the background.

        fork_url may be a URL or an alias from [rpc_endpoints]; balance is in ether per account.
        """
        await self._require_foundry()
        argv = commands.anvil_start(
            self.config.anvil,
            port=port,
            host=host,
            block_time=block_time,
            fork_url=self.resolver.resolve(fork_url) if fork_url else None,
            fork_block_number=fork_block_number,
            chain_id=chain_id,
            accounts=accounts,
            balance=balance,
        )
        try:
            status = await self.node.start(argv)
        except NodeError as e:
            raise ToolError(f"Failed to start anvil: {e}") from e
        text = f"Anvil started on {status.url} (pid {status.pid})"
        if not await asyncio.to_thread(is_responding, status.url):
            text += "\nThe node is not answering JSON-RPC yet; it may still be starting up."
        return text

    async def anvil_stop(self) -> str:
        """Stop the running anvil node."""
        await self._require_foundry()
        try:
            await self.node.stop()
        except NodeError as e:
            raise ToolError(f"Failed to stop anvil: {e}") from e
        return "Anvil stopped"

    async def anvil_status(self) -> str:
        """Report whether an anvil node is running and where."""
        await self._require_foundry()
        status = await self.node.current_status()
        if not status.running:
            return "Anvil is not running"
        return f"Anvil is running on {status.url} (port {status.port}, pid {status.pid})"

    # cast

    async def cast_call(
        self,
        contract_address: str,
        function_signature: str,
        args: Optional[List[str]] = None,
        rpc_url: Optional[str] = None,
        block_number: Optional[str] = None,
        from_address: Optional[str] = None,
    ) -> str:
        """Call a contract function (read-only), e.g. function_signature='balanceOf(address)(uint256)'."""
        await self._require_foundry()
        argv = commands.cast_call(
            self.config.cast,
            contract_address,
            function_signature,
            args=args,
            rpc_url=self.resolver.resolve(rpc_url),
            block=block_number,
            from_address=from_address,
        )
        output = await self._run(argv, "Call failed")
        name = function_signature.split("(")[0]
        return f"Call to {contract_address}.{name} result:\n{_tidy_lines(output)}"

    async def cast_send(
        self,
        contract_address: str,
        function_signature: str,
        args: Optional[List[str]] = None,
        from_address: Optional[str] = None,
        value: Optional[str] = None,
        rpc_url: Optional[str] = None,
        gas_limit: Optional[str] = None,
        gas_price: Optional[str] = None,
        confirmations: Optional[int] = None,
        private_key: Optional[str] = None,
    ) -> str:
        """Send a transaction to a contract function.

        Signed with private_key, or the PRIVATE_KEY environment credential when omitted.
        """
        await self._require_foundry()
        argv = commands.cast_send(
            self.config.cast,
            contract_address,
            function_signature,
            args=args,
            from_address=from_address,
            value=value,
            rpc_url=self.resolver.resolve(rpc_url),
            gas_limit=gas_limit,
            gas_price=gas_price,
            confirmations=confirmations,
            private_key=self.config.signing_key(private_key),
        )
        output = await self._run(argv, "Transaction failed")
        return f"Transaction sent successfully:\n{output}"

    async def cast_balance(
        self,
        address: str,
        rpc_url: Optional[str] = None,
        block_number: Optional[str] = None,
        format_ether: bool = False,
    ) -> str:
        """Check the ETH balance of an address (wei unless format_ether)."""
        await self._require_foundry()
        argv = commands.cast_balance(
            self.config.cast,
            address,
            rpc_url=self.resolver.resolve(rpc_url),
            block=block_number,
            ether=format_ether,
        )
        output = await self._run(argv, "Failed to get balance")
        unit = "ETH" if format_ether else "wei"
        return f"Balance of {address}: {output.strip()} {unit}"

    async def cast_receipt(
        self,
        tx_hash: str,
        rpc_url: Optional[str] = None,
        confirmations: Optional[int] = None,
        field: Optional[str] = None,
    ) -> str:
        """Get a transaction receipt, optionally a single field such as 'status'."""
        await self._require_foundry()
        argv = commands.cast_receipt(
            self.config.cast,
            tx_hash,
            rpc_url=self.resolver.resolve(rpc_url),
            confirmations=confirmations,
            field=field,
        )
        output = await self._run(argv, "Failed to get receipt")
        return f"Transaction receipt for {tx_hash}{_suffix(field)}:\n{output}"

    async def cast_abi_encode(self, signature: str, args: Optional[List[str]] = None) -> str:
        """ABI-encode arguments for a function signature."""
        await self._require_foundry()
        output = await self._run(commands.cast_abi_encode(self.config.cast, signature, args), "Encoding failed")
        return f"ABI encoded data: {output.strip()}"

    async def cast_abi_decode(self, signature: str, data: str, decode_input: bool = False) -> str:
        """Decode ABI-encoded data, e.g. signature='balanceOf(address)(uint256)'.

        Output types are decoded unless decode_input is set.
        """
        await self._require_foundry()
        argv = commands.cast_abi_decode(self.config.cast, signature, data, decode_input=decode_input)
        output = await self._run(argv, "Decoding failed")
        return f"Decoded data: {output.strip()}"

    async def cast_4byte(self, selector: str) -> str:
        """Look up a function selector (0x + 4 bytes)."""
        await self._require_foundry()
        output = await self._run(commands.cast_4byte(self.config.cast, selector), "Signature lookup failed")
        return f"Signature lookup for {selector}:\n{output.strip()}"

    async def cast_compute_slot(self, slot: str, key: str, key_type: str = "address") -> str:
        """Compute the storage slot of a mapping entry."""
        await self._require_foundry()
        argv = commands.cast_compute_slot(self.config.cast, slot, key, key_type)
        output = await self._run(argv, "Computation failed")
        return f"Storage slot for mapping[{key}] at slot {slot} (key type: {key_type}):\n{output.strip()}"

    async def cast_storage(
        self,
        address: str,
        slot: str,
        rpc_url: Optional[str] = None,
        block_number: Optional[str] = None,
    ) -> str:
        """Read contract storage at a slot."""
        await self._require_foundry()
        argv = commands.cast_storage(
            self.config.cast, address, slot, rpc_url=self.resolver.resolve(rpc_url), block=block_number
        )
        output = await self._run(argv, "Failed to read storage")
        return f"Storage at {address} slot {slot}: {output.strip()}"

    async def cast_tx(self, tx_hash: str, rpc_url: Optional[str] = None, field: Optional[str] = None) -> str:
        """Get information about a transaction."""
        await self._require_foundry()
        argv = commands.cast_tx(self.config.cast, tx_hash, rpc_url=self.resolver.resolve(rpc_url), field=field)
        output = await self._run(argv, "Failed to get transaction")
        return f"Transaction {tx_hash}{_suffix(field)}:\n{output}"

    async def cast_calldata(self, calldata: str, signature: Optional[str] = None) -> str:
        """Decode calldata with a known signature, or via the selector database when none is given."""
        await self._require_foundry()
        argv = commands.cast_calldata(self.config.cast, calldata, signature)
        output = await self._run(argv, "Failed to decode calldata")
        header = f"Decoded calldata for {signature}" if signature else "Decoded calldata"
        return f"{header}:\n{output}"

    async def cast_run(
        self,
        tx_hash: str,
        rpc_url: Optional[str] = None,
        quick: bool = False,
        verbosity: Verbosity = "vvv",
        debug: bool = False,
        labels: Optional[List[str]] = None,
    ) -> str:
        """Replay a published transaction locally and print its trace. Labels use '<address>:<label>'."""
        await self._require_foundry()
        argv = commands.cast_run(
            self.config.cast,
            tx_hash,
            rpc_url=self.resolver.resolve(rpc_url),
            quick=quick,
            verbosity=verbosity,
            debug=debug,
            labels=labels,
        )
        output = await self._run(argv, "Failed to run transaction")
        return f"Transaction trace for {tx_hash}:\n{output}"

    async def cast_send_tx(
        self,
        to: str,
        data: Optional[str] = None,
        value: Optional[str] = None,
        from_address: Optional[str] = None,
        rpc_url: Optional[str] = None,
        nonce: Optional[int] = None,
        gas_limit: Optional[str] = None,
        gas_price: Optional[str] = None,
        broadcast: bool = False,
        private_key: Optional[str] = None,
    ) -> str:
        """Build a raw transaction, or send it when broadcast is true."""
        await self._require_foundry()
        argv = commands.cast_send_tx(
            self.config.cast,
            to,
            data=data,
            value=value,
            from_address=from_address,
            rpc_url=self.resolver.resolve(rpc_url),
            nonce=nonce,
            gas_limit=gas_limit,
            gas_price=gas_price,
            broadcast=broadcast,
            private_key=self.config.signing_key(private_key),
        )
        if broadcast:
            output = await self._run(argv, "Transaction failed")
            return f"Transaction sent:\n{output}"
        output = await self._run(argv, "Transaction creation failed")
        return f"Transaction created:\n{output}"

    async def cast_block(self, block_number: str, rpc_url: Optional[str] = None, field: Optional[str] = None) -> str:
        """Get a block by number, hash or tag ('latest', 'earliest', ...)."""
        await self._require_foundry()
        argv = commands.cast_block(self.config.cast, block_number, rpc_url=self.resolver.resolve(rpc_url), field=field)
        output = await self._run(argv, "Failed to get block info")
        return f"Block {block_number}{_suffix(field)}:\n{output}"

    async def cast_chain_id(self, rpc_url: Optional[str] = None) -> str:
        """Get the chain id of an RPC endpoint."""
        await self._require_foundry()
        output = await self._run(
            commands.cast_chain_id(self.config.cast, rpc_url=self.resolver.resolve(rpc_url)), "Failed to get chain id"
        )
        return f"Chain ID: {output.strip()}"

    async def cast_sig(self, signature: str) -> str:
        """Get the 4-byte selector of a function signature."""
        await self._require_foundry()
        output = await self._run(commands.cast_sig(self.config.cast, signature), "Selector computation failed")
        return f"Selector for {signature}: {output.strip()}"

    async def convert_eth_units(self, value: str, from_unit: EthUnit = "ether", to_unit: EthUnit = "wei") -> str:
        """Convert an amount between wei, gwei and ether."""
        await self._require_foundry()
        argv = commands.cast_to_unit(self.config.cast, value, from_unit, to_unit)
        output = await self._run(argv, "Conversion failed")
        return f"{value} {from_unit} = {output.strip()} {to_unit}"

    # workspace

    async def create_solidity_file(self, file_path: str, content: str, overwrite: bool = False) -> str:
        """Write a file into the workspace, e.g. 'src/Token.sol' or 'script/Deploy.s.sol'."""
        await self._require_foundry()
        await self._workspace_dir()
        try:
            target = self.workspace.write_file(file_path, content, overwrite=overwrite)
        except (FileExistsError, WorkspaceError) as e:
            raise ToolError(str(e)) from e
        except OSError as e:
            raise ToolError(f"Failed to write {file_path}: {e}") from e
        return f"File written: {target}"

    async def read_file(self, file_path: str) -> str:
        """Read a file from the workspace."""
        await self._require_foundry()
        await self._workspace_dir()
        try:
            return self.workspace.read_file(file_path)
        except (FileNotFoundError, WorkspaceError) as e:
            raise ToolError(str(e)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ToolError(f"Failed to read {file_path}: {e}") from e

    async def list_files(self, directory: str = "") -> str:
        """List every file under a workspace directory, relative to it."""
        await self._require_foundry()
        await self._workspace_dir()
        try:
            files = self.workspace.list_files(directory)
        except (FileNotFoundError, WorkspaceError) as e:
            raise ToolError(str(e)) from e
        if not files:
            return f"No files found in {directory or '.'}"
        return "\n".join(files)

    async def install_dependency(self, dependency: str) -> str:
        """Install a dependency into the workspace, e.g. 'OpenZeppelin/openzeppelin-contracts'."""
        await self._require_foundry()
        cwd = await self._workspace_dir()
        output = await self._run(commands.forge_install(self.config.forge, dependency), "Install failed", cwd=cwd)
        return f"Installed {dependency}:\n{output}"

    async def forge_build(self, sizes: bool = False) -> str:
        """Compile the workspace contracts."""
        await self._require_foundry()
        cwd = await self._workspace_dir()
        output = await self._run(commands.forge_build(self.config.forge, sizes=sizes), "Build failed", cwd=cwd)
        return f"Build succeeded:\n{output}"

    async def forge_test(
        self,
        match_test: Optional[str] = None,
        match_contract: Optional[str] = None,
        fork_url: Optional[str] = None,
        verbosity: Optional[Verbosity] = None,
    ) -> str:
        """Run the workspace tests."""
        await self._require_foundry()
        cwd = await self._workspace_dir()
        argv = commands.forge_test(
            self.config.forge,
            match_test=match_test,
            match_contract=match_contract,
            fork_url=self.resolver.resolve(fork_url) if fork_url else None,
            verbosity=verbosity,
        )
        output = await self._run(argv, "Tests failed", cwd=cwd)
        return f"Tests passed:\n{output}"

    async def forge_script(
        self,
        script_path: str,
        sig: Optional[str] = None,
        args: Optional[List[str]] = None,
        rpc_url: Optional[str] = None,
        broadcast: bool = False,
        verbosity: Optional[Verbosity] = None,
        private_key: Optional[str] = None,
    ) -> str:
        """Run a forge script from the workspace, e.g. 'script/Deploy.s.sol'.

        args are passed to the entry point named by sig (run() when sig is omitted).
        Broadcasting signs with private_key, or the PRIVATE_KEY environment credential.
        """
        await self._require_foundry()
        cwd = await self._workspace_dir()
        resolved = self.resolver.resolve(rpc_url) if (rpc_url or broadcast) else None
        argv = commands.forge_script(
            self.config.forge,
            script_path,
            sig=sig,
            args=args,
            rpc_url=resolved,
            broadcast=broadcast,
            verbosity=verbosity,
            private_key=self.config.signing_key(private_key) if broadcast else None,
        )
        output = await self._run(argv, "Script failed", cwd=cwd)
        return f"Script executed:\n{output}"


TOOL_NAMES = (
    "anvil_start",
    "anvil_stop",
    "anvil_status",
    "cast_call",
    "cast_send",
    "cast_balance",
    "cast_receipt",
    "cast_abi_encode",
    "cast_abi_decode",
    "cast_4byte",
    "cast_compute_slot",
    "cast_storage",
    "cast_tx",
    "cast_calldata",
    "cast_run",
    "cast_send_tx",
    "cast_block",
    "cast_chain_id",
    "cast_sig",
    "convert_eth_units",
    "create_solidity_file",
    "read_file",
    "list_files",
    "install_dependency",
    "forge_build",
    "forge_test",
    "forge_script",
)
