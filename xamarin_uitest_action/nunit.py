"""NUnit 3 console runner used to execute Xamarin.UITest assemblies."""

import asyncio
import logging
import os
import shlex
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from xamarin_uitest_action.errors import NotFoundError

log = logging.getLogger(__name__)

NUNIT_CONSOLE_ENV = "NUNIT_CONSOLE_PATH"
NUNIT_CONSOLE_NAMES = ("nunit3-console", "nunit3-console.exe")


def find_nunit3_console(explicit_path: Path | None = None) -> Path:
    """Locate the NUnit 3 console runner.

    Looks at the explicit path first, then the NUNIT_CONSOLE_PATH environment
    variable, then PATH.

    Raises:
        NotFoundError: If no console runner can be found

    """
    if explicit_path is not None:
        if not explicit_path.exists():
            raise NotFoundError(f"nunit3-console not exist at: {explicit_path}")
        return explicit_path

    if env_path := os.environ.get(NUNIT_CONSOLE_ENV):
        path = Path(env_path)
        if not path.exists():
            raise NotFoundError(
                f"nunit3-console not exist at: {path} (from {NUNIT_CONSOLE_ENV})"
            )
        return path

    for name in NUNIT_CONSOLE_NAMES:
        if found := shutil.which(name):
            return Path(found)

    raise NotFoundError(
        f"nunit3-console not found, install it or set {NUNIT_CONSOLE_ENV}"
    )


@dataclass(frozen=True, kw_only=True)
class NUnitConsole:
    """Builds and runs one nunit3-console invocation."""

    console_path: Path
    dll_path: Path
    result_log_path: Path
    test_to_run: str = ""

    def command(self) -> Sequence[str]:
        """Return the command line of this invocation."""
        if self.console_path.suffix == ".exe":
            args = ["mono", str(self.console_path)]
        else:
            args = [str(self.console_path)]

        args.append(str(self.dll_path))
        if self.test_to_run:
            args.append(f"--test={self.test_to_run}")
        args.append(f"--result={self.result_log_path}")
        return args

    def printable_command(self) -> str:
        """Return the command line quoted for logging."""
        return shlex.join(self.command())

    async def run(self, env: Mapping[str, str]) -> int:
        """Run the tests and return the console's exit code.

        Args:
            env: Variables added to the current environment for the child only

        """
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(), env={**os.environ, **env}
            )
        except OSError as e:
            raise NotFoundError(f"Failed to start nunit3-console: {e}") from e

        return await process.wait()
