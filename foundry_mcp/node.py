"""
node.py
Background anvil node: liveness detection from the process table, start and stop.

Detection is best-effort. Processes are matched by name and start/stop are
confirmed after a fixed grace period rather than by polling, so two callers
acting at the same time can both pass the running check.
"""
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import psutil
from web3 import Web3

from .executor import CommandExecutor

logger = logging.getLogger(__name__)

NODE_NAME = "anvil"
DEFAULT_PORT = "8545"


class NodeError(RuntimeError):
    pass


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    name: str
    cmdline: List[str]


@dataclass(frozen=True)
class NodeStatus:
    running: bool
    port: Optional[str] = None
    url: Optional[str] = None
    pid: Optional[int] = None


class ProcessRegistry:
    """Finds and kills processes by executable name."""

    def find(self, name: str) -> List[ProcessInfo]:
        raise NotImplementedError

    def kill(self, name: str) -> int:
        raise NotImplementedError


def _matches(name: str, proc_name: str, cmdline: Sequence[str]) -> bool:
    if proc_name in (name, name + ".exe"):
        return True
    if cmdline:
        exe = os.path.basename(cmdline[0])
        return exe in (name, name + ".exe")
    return False


class PsutilProcessRegistry(ProcessRegistry):
    def find(self, name: str) -> List[ProcessInfo]:
        found = []
        for p in psutil.process_iter(attrs=["pid", "name", "cmdline", "status"]):
            info = p.info
            # exited children nobody has waited on yet still carry the name
            if info.get("status") == psutil.STATUS_ZOMBIE:
                continue
            cmdline = info.get("cmdline") or []
            if _matches(name, info.get("name") or "", cmdline):
                found.append(ProcessInfo(pid=info["pid"], name=info.get("name") or name, cmdline=list(cmdline)))
        return found

    def kill(self, name: str) -> int:
        killed = 0
        for info in self.find(name):
            try:
                psutil.Process(info.pid).terminate()
                killed += 1
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                logger.warning("could not terminate %s (pid %s): %s", name, info.pid, e)
        return killed


def _flag_value(cmdline: Sequence[str], *flags: str) -> Optional[str]:
    for i, arg in enumerate(cmdline):
        for flag in flags:
            if arg == flag and i + 1 < len(cmdline):
                return cmdline[i + 1]
            if arg.startswith(flag + "="):
                return arg.split("=", 1)[1]
    return None


def status_from_process(info: ProcessInfo) -> NodeStatus:
    port = _flag_value(info.cmdline, "--port", "-p") or DEFAULT_PORT
    host = _flag_value(info.cmdline, "--host")
    if not host or host == "0.0.0.0":
        host = "localhost"
    return NodeStatus(running=True, port=port, url=f"http://{host}:{port}", pid=info.pid)


def is_responding(url: str) -> bool:
    try:
        return Web3(Web3.HTTPProvider(url, request_kwargs={"timeout": 2})).is_connected()
    except Exception as e:
        logger.debug("rpc probe of %s failed: %s", url, e)
        return False


class NodeMonitor:
    def __init__(
        self,
        registry: ProcessRegistry,
        executor: CommandExecutor,
        start_grace: float = 2.0,
        stop_grace: float = 1.0,
    ):
        self.registry = registry
        self.executor = executor
        self.start_grace = start_grace
        self.stop_grace = stop_grace

    def status(self) -> NodeStatus:
        procs = self.registry.find(NODE_NAME)
        if not procs:
            return NodeStatus(running=False)
        return status_from_process(procs[0])

    async def current_status(self) -> NodeStatus:
        """status() run off the event loop; the process table scan blocks."""
        return await asyncio.to_thread(self.status)

    async def start(self, argv: Sequence[str]) -> NodeStatus:
        current = await self.current_status()
        if current.running:
            raise NodeError(f"Anvil is already running on {current.url}")
        try:
            pid = self.executor.spawn_detached(argv)
        except OSError as e:
            raise NodeError(str(e)) from e
        logger.info("anvil launched (pid %s), waiting %.1fs", pid, self.start_grace)
        await asyncio.sleep(self.start_grace)
        self.executor.reap()
        after = await self.current_status()
        if not after.running:
            raise NodeError("Anvil did not start; check the flags or run it manually to see its output")
        return after

    async def stop(self) -> NodeStatus:
        current = await self.current_status()
        if not current.running:
            raise NodeError("Anvil is not running")
        killed = await asyncio.to_thread(self.registry.kill, NODE_NAME)
        logger.info("sent terminate to %d anvil process(es)", killed)
        await asyncio.sleep(self.stop_grace)
        self.executor.reap()
        after = await self.current_status()
        if after.running:
            raise NodeError(f"Anvil is still running (pid {after.pid})")
        return after
