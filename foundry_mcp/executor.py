"""
executor.py
Runs Foundry binaries as subprocesses and normalizes what they print.
"""
import asyncio
import logging
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SECRET_FLAGS = ("--private-key", "--mnemonic")


@dataclass(frozen=True)
class CommandResult:
    succeeded: bool
    output: str


def redact(argv: Sequence[str]) -> str:
    """Render argv for logging with secret flag values masked."""
    shown: List[str] = []
    hide_next = False
    for arg in argv:
        if hide_next:
            shown.append("****")
            hide_next = False
            continue
        shown.append(arg)
        hide_next = arg in SECRET_FLAGS
    return " ".join(shown)


class CommandExecutor:
    def __init__(self):
        self._children: Dict[int, subprocess.Popen] = {}

    async def run(self, argv: Sequence[str], cwd: Optional[str] = None) -> CommandResult:
        logger.debug("exec: %s (cwd=%s)", redact(argv), cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            out, err = await proc.communicate()
        except OSError as e:
            logger.warning("could not launch %s: %s", argv[0], e)
            return CommandResult(False, str(e))

        stdout = out.decode("utf-8", errors="replace")
        stderr = err.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            logger.debug("%s exited with %s", argv[0], proc.returncode)
            return CommandResult(False, stderr or stdout or f"{argv[0]} exited with code {proc.returncode}")
        if stderr and not stdout:
            return CommandResult(False, stderr)
        return CommandResult(True, stdout)

    def spawn_detached(self, argv: Sequence[str], cwd: Optional[str] = None) -> int:
        """Start a long-lived child that outlives the call; returns its pid."""
        logger.info("spawning detached: %s", redact(argv))
        proc = subprocess.Popen(
            list(argv),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        self._children[proc.pid] = proc
        return proc.pid

    def reap(self) -> List[int]:
        """Collect exit status of detached children that have finished; returns their pids."""
        done = [pid for pid, proc in self._children.items() if proc.poll() is not None]
        for pid in done:
            del self._children[pid]
        return done
