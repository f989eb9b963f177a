import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import BranchExistsError, GitCommandError, NothingToCommitError

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)
BRANCH_EXISTS_MARKER = "already exists"
PUSH_REJECTED_MARKERS = ("[rejected]", "updates were rejected")


@dataclass
class GitResult:
    args: List[str]
    returncode: int
    stdout: str
    stderr: str


class GitRunner:
    """Runs git commands and turns failures into classified exceptions."""

    def __init__(self, git_executable: str = "git"):
        self.git_executable = git_executable

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        operation: Optional[str] = None,
        check: bool = True,
    ) -> GitResult:
        command = [self.git_executable, *args]
        operation = operation or args[0]
        logger.debug(f"Running: {' '.join(command)}" + (f" (in {cwd})" if cwd else ""))

        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise GitCommandError(
                operation, f"git executable not found: {self.git_executable}", command
            ) from e

        result = GitResult(
            args=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if check and result.returncode != 0:
            raise self._classify(operation, result)

        return result

    def _classify(self, operation: str, result: GitResult) -> GitCommandError:
        output = (result.stderr.strip() or result.stdout.strip()) or f"exit code {result.returncode}"
        combined = f"{result.stdout}\n{result.stderr}".lower()

        error_class = GitCommandError
        if operation == "commit" and any(marker in combined for marker in NOTHING_TO_COMMIT_MARKERS):
            error_class = NothingToCommitError
        elif operation == "branch" and BRANCH_EXISTS_MARKER in combined:
            error_class = BranchExistsError
        elif operation == "push" and any(marker in combined for marker in PUSH_REJECTED_MARKERS):
            error_class = BranchExistsError

        return error_class(
            operation,
            output,
            command=result.args,
            returncode=result.returncode,
            stderr=result.stderr,
        )
