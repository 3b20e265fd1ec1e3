"""Child SA control over the charon VICI socket.

Requests are nested messages of the shape ``{"child": {"<name>": {}}}``. The
daemon streams control-log events while it works; they are drained and logged
before the final result is known, so a request either fully succeeds or
raises.
"""

from __future__ import annotations

import logging
import socket
import typing as t

import vici
from vici.exception import CommandException, DeserializationException, SessionException

from ..errors import ControlChannelFailure, MissingParameter

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = "/var/run/charon.vici"


def child_request(name: str) -> t.Dict[str, t.Any]:
    return {"child": {name: {}}}


class ViciController:
    def __init__(self, socket_path: str = DEFAULT_SOCKET_PATH, timeout: float = 10.0) -> None:
        self.socket_path = socket_path
        self.timeout = timeout

    def _connect(self) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
        except OSError as e:
            sock.close()
            raise ControlChannelFailure(f"cannot reach charon at {self.socket_path}: {e}")
        return sock

    def _command(self, command: str, name: str) -> None:
        name = (name or "").strip()
        if not name:
            raise MissingParameter("missing query parameter: name")

        sock = self._connect()
        try:
            session = vici.Session(sock)
            stream = getattr(session, command)(child_request(name))
            for event in stream:
                logger.debug("%s %s: %s", command, name, event.get("msg", event))
        except CommandException as e:
            raise ControlChannelFailure(f"{command} {name} rejected: {e}")
        except (SessionException, DeserializationException, OSError) as e:
            raise ControlChannelFailure(f"{command} {name} failed: {e}")
        finally:
            sock.close()
        logger.info("%s %s: ok", command, name)

    def initiate(self, name: str) -> None:
        self._command("initiate", name)

    def terminate(self, name: str) -> None:
        self._command("terminate", name)
