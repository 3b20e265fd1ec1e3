"""swanctl invocation.

One subprocess per call, stdout and stderr combined, bounded by a timeout.
No retries and no caching; every request sees fresh daemon state.
"""

from __future__ import annotations

import logging
import subprocess
import typing as t

from ..errors import ExternalProcessFailure, ExternalProcessTimeout

logger = logging.getLogger(__name__)

LIST_CONNS = ("--list-conns",)
LIST_SAS = ("--list-sas",)


class SwanctlRunner:
    def __init__(self, binary: str = "swanctl", timeout: float = 10.0) -> None:
        self.binary = binary
        self.timeout = timeout

    def run(self, *args: str) -> str:
        """Run swanctl and return its combined output.

        Raises:
            ExternalProcessTimeout: swanctl did not exit within ``timeout``
            ExternalProcessFailure: launch failed or the exit code was non-zero
        """
        cmd = [self.binary, *args]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            output = e.output or ""
            if isinstance(output, bytes):
                output = output.decode("utf-8", errors="replace")
            raise ExternalProcessTimeout(cmd, self.timeout, output=output)
        except OSError as e:
            raise ExternalProcessFailure(cmd, reason=str(e))

        if result.returncode != 0:
            raise ExternalProcessFailure(cmd, output=result.stdout, returncode=result.returncode)
        return result.stdout

    def read(self, *args: str) -> str:
        """Like ``run`` but a failed invocation reads as empty text."""
        try:
            return self.run(*args)
        except ExternalProcessFailure as e:
            logger.warning("Treating swanctl output as empty: %s", e)
            return ""

    def list_conns(self, strict: bool = True) -> str:
        return self.run(*LIST_CONNS) if strict else self.read(*LIST_CONNS)

    def list_sas(self, strict: bool = True) -> str:
        return self.run(*LIST_SAS) if strict else self.read(*LIST_SAS)
