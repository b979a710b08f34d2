import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass
class ToolResult:
    output: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_tool(executable: Path, args: List[str], timeout: Optional[float] = None) -> ToolResult:
    """
    Runs an external tool once and captures stdout+stderr together.

    Never raises: a tool that cannot be started or that times out is
    reported with exit code -1 so callers treat it as "no data".
    """
    cmd = [str(executable), *args]
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logging.warning(f"{executable} timed out after {timeout}s")
        return ToolResult("", -1)
    except OSError as e:
        logging.debug(f"Could not run {executable}: {e}")
        return ToolResult("", -1)

    return ToolResult(proc.stdout.strip(), proc.returncode)
