"""
workspace.py
The persistent forge project that scripts, tests and dependencies live in.
"""
import logging
from pathlib import Path
from typing import List

from . import commands
from .executor import CommandExecutor

logger = logging.getLogger(__name__)

MARKER = "foundry.toml"


class WorkspaceError(RuntimeError):
    pass


class Workspace:
    def __init__(self, root: Path, forge: str, executor: CommandExecutor):
        self.root = Path(root)
        self.forge = forge
        self.executor = executor

    @property
    def config_file(self) -> Path:
        return self.root / MARKER

    async def ensure_initialized(self) -> Path:
        """Create the root on first use and run `forge init` if it is not a project yet."""
        self.root.mkdir(parents=True, exist_ok=True)
        if self.config_file.exists():
            return self.root
        logger.info("initializing forge project in %s", self.root)
        result = await self.executor.run(commands.forge_init(self.forge), cwd=str(self.root))
        if not result.succeeded:
            raise WorkspaceError(f"Failed to initialize workspace: {result.output}")
        return self.root

    def resolve(self, relative: str) -> Path:
        root = self.root.resolve()
        target = (root / relative).resolve()
        if target != root and root not in target.parents:
            raise WorkspaceError(f"Path escapes the workspace: {relative}")
        return target

    def write_file(self, relative: str, content: str, overwrite: bool = False) -> Path:
        target = self.resolve(relative)
        if target.exists() and not overwrite:
            raise FileExistsError(f"File already exists: {relative} (pass overwrite=true to replace it)")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info("wrote %s (%d bytes)", target, len(content))
        return target

    def read_file(self, relative: str) -> str:
        target = self.resolve(relative)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {relative}")
        return target.read_text(encoding="utf-8")

    def list_files(self, directory: str = "") -> List[str]:
        base = self.resolve(directory)
        if not base.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory or '.'}")
        found: List[str] = []
        self._walk(base, base, found)
        return found

    def _walk(self, base: Path, current: Path, found: List[str]) -> None:
        for entry in sorted(current.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                self._walk(base, entry, found)
            else:
                found.append(entry.relative_to(base).as_posix())
