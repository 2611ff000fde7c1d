"""Synchronous execution of external commands (git, gh)."""

import os
import sys
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Union

import git

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of an external command.

    `output` holds trimmed stdout even when the command failed, since some
    tools (gh api) print a usable body alongside a non-zero exit.
    """

    success: bool
    output: str = ""
    error: Optional[str] = None
    returncode: Optional[int] = None


def _decode(value: Union[str, bytes, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class ProcessExecutor:
    """Runs commands through GitPython's command runner.

    Non-zero exits and spawn failures are reported as an unsuccessful
    CommandResult instead of raising. Callers decide whether a failure matters.
    """

    def __init__(self, working_dir: Optional[str] = None):
        """Initialize the executor.

        Args:
            working_dir: Default directory to run commands in
        """
        self.working_dir = working_dir

    def _runner(self, cwd: Optional[str]) -> git.Git:
        return git.Git(cwd or self.working_dir)

    def _missing_directory(self, cwd: Optional[str]) -> Optional[CommandResult]:
        directory = cwd or self.working_dir
        if directory and not os.path.isdir(directory):
            # GitPython silently falls back to the process cwd otherwise
            return CommandResult(success=False, error=f"No such directory: {directory}")
        return None

    def _execute(self, command: List[str], cwd: Optional[str], **kwargs) -> CommandResult:
        missing = self._missing_directory(cwd)
        if missing:
            return missing

        try:
            status, stdout, stderr = self._runner(cwd).execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                **kwargs,
            )
        except git.exc.GitCommandNotFound as e:
            logger.debug(f"Command {command[0]} could not be started: {e.status}")
            return CommandResult(success=False, error=f"{command[0]}: command not found")
        except OSError as e:
            logger.debug(f"Command {' '.join(command)} could not start: {e}")
            return CommandResult(success=False, error=str(e))

        output = _decode(stdout).strip()
        if status != 0:
            error = _decode(stderr).strip() or f"exit code {status}"
            logger.debug(f"Command {' '.join(command)} failed ({status}): {error}")
            return CommandResult(success=False, output=output, error=error, returncode=status)
        return CommandResult(success=True, output=output, returncode=status)

    def run(self, command: List[str], cwd: Optional[str] = None) -> CommandResult:
        """Run a command and capture its output.

        Args:
            command: Program and arguments, e.g. ["git", "status"]
            cwd: Directory to run in (defaults to the executor's working_dir)

        Returns:
            CommandResult with trimmed stdout, and stderr on failure
        """
        return self._execute(command, cwd)

    def stream(
        self,
        command: List[str],
        cwd: Optional[str] = None,
        output_stream: Optional[BinaryIO] = None,
    ) -> CommandResult:
        """Run a command, copying its stdout straight to the terminal.

        Only success or failure is reported; output is not captured.

        Args:
            command: Program and arguments
            cwd: Directory to run in
            output_stream: Binary stream to copy stdout to (defaults to stdout)

        Returns:
            CommandResult without output
        """
        target = output_stream if output_stream is not None else sys.stdout.buffer
        result = self._execute(command, cwd, output_stream=target)
        result.output = ""
        return result
