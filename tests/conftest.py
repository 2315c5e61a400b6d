from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from foundry_mcp.config import FoundryConfig
from foundry_mcp.executor import CommandResult
from foundry_mcp.node import NodeMonitor, ProcessInfo, ProcessRegistry
from foundry_mcp.server import build_tools
from foundry_mcp.tools import FoundryTools


class FakeExecutor:
    """Records every command instead of running it.

    Results are looked up by the subcommand (argv[1]); anything unknown succeeds
    with empty output.
    """

    def __init__(self, results: Optional[Dict[str, CommandResult]] = None):
        self.results = {"--version": CommandResult(True, "forge 1.0.0")}
        self.results.update(results or {})
        self.calls: List[Tuple[List[str], Optional[str]]] = []
        self.spawned: List[List[str]] = []
        self.on_spawn = None

    async def run(self, argv: Sequence[str], cwd: Optional[str] = None) -> CommandResult:
        self.calls.append((list(argv), cwd))
        key = argv[1] if len(argv) > 1 else ""
        return self.results.get(key, CommandResult(True, ""))

    def spawn_detached(self, argv: Sequence[str], cwd: Optional[str] = None) -> int:
        self.spawned.append(list(argv))
        if self.on_spawn:
            self.on_spawn(list(argv))
        return 4242

    def reap(self) -> List[int]:
        return []

    @property
    def commands(self) -> List[List[str]]:
        """Everything run except the toolchain probe."""
        return [argv for argv, _ in self.calls if argv[1:] != ["--version"]]


class FakeRegistry(ProcessRegistry):
    def __init__(self, procs: Optional[List[ProcessInfo]] = None, survives_kill: bool = False):
        self.procs = list(procs or [])
        self.survives_kill = survives_kill
        self.kills: List[str] = []

    def find(self, name: str) -> List[ProcessInfo]:
        return [p for p in self.procs if p.name == name]

    def kill(self, name: str) -> int:
        self.kills.append(name)
        matched = self.find(name)
        if not self.survives_kill:
            self.procs = [p for p in self.procs if p.name != name]
        return len(matched)


def anvil_process(*args: str, pid: int = 4242) -> ProcessInfo:
    return ProcessInfo(pid=pid, name="anvil", cmdline=["anvil", *args])


@pytest.fixture
def config(tmp_path) -> FoundryConfig:
    return FoundryConfig(
        bin_dir=tmp_path / "bin",
        workspace=tmp_path / "workspace",
        node_start_grace=0,
        node_stop_grace=0,
    )


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def node(registry, executor) -> NodeMonitor:
    return NodeMonitor(registry, executor, start_grace=0, stop_grace=0)


@pytest.fixture
def tools(config, executor, registry) -> FoundryTools:
    return build_tools(config, executor=executor, registry=registry)
