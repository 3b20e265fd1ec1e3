"""Error kinds surfaced by the process and control boundaries.

Parsers never raise; these are for swanctl invocations and VICI requests,
which the HTTP and CLI layers map to distinguishable failures.
"""

from __future__ import annotations

import typing as t


class SwanUIError(Exception):
    """Base class for all swanui failures."""


class ExternalProcessFailure(SwanUIError):
    """swanctl exited non-zero or could not be launched."""

    def __init__(
        self,
        command: t.Sequence[str],
        output: str = "",
        returncode: t.Optional[int] = None,
        reason: t.Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.output = output or ""
        self.returncode = returncode
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        cmd = " ".join(self.command)
        if self.reason:
            return f"{cmd}: {self.reason}"
        return f"{cmd} exited with status {self.returncode}"


class ExternalProcessTimeout(ExternalProcessFailure):
    """swanctl did not finish within the configured timeout."""

    def __init__(self, command: t.Sequence[str], timeout: float, output: str = "") -> None:
        self.timeout = timeout
        super().__init__(command, output=output, reason=f"timed out after {timeout:g}s")


class ControlChannelFailure(SwanUIError):
    """The charon VICI socket was unreachable or rejected the request."""


class MissingParameter(SwanUIError):
    """A required identifier was not supplied to a control operation."""
