"""Pytest configuration and fixtures."""

import typing as t

import pytest

from swanui.agent.swanctl import SwanctlRunner
from swanui.errors import ExternalProcessFailure

LIST_SAS_TEXT = """\
gw-gw: #1, ESTABLISHED, IKEv2, 1fc1fe8e2f3f2f6a_i* 5b38d1e1c12f6dd5_r
  local  'moon.strongswan.org' @ 192.168.0.1[4500]
  remote 'sun.strongswan.org' @ 192.168.0.2[4500]
  AES_CBC-128/HMAC_SHA2_256_128/PRF_HMAC_SHA2_256/ECP_256
  established 2s ago, rekeying in 13832s
  net-net: #1, reqid 1, INSTALLED, TUNNEL, ESP:AES_GCM_16-128
    installed 2s ago, rekeying in 3410s, expires in 3958s
    in  c8bd5fd2,  1,024 bytes,     8 packets,     1s ago
    out cb8b1e09,    512 bytes,     4 packets,     1s ago
    local  10.1.0.0/16
    remote 10.2.0.0/16
  host-host: #2, reqid 2, INSTALLED, TUNNEL, ESP:AES_CBC-256/HMAC_SHA2_256_128
    installed 5s ago, rekeying in 3300s, expires in 3900s
    in  c1234567,      0 bytes,     0 packets
    out c7654321,      0 bytes,     0 packets
    local  192.168.0.1/32
    remote 192.168.0.2/32
"""

LIST_CONNS_TEXT = """\
gw-gw: IKEv2, no reauthentication, rekeying every 14400s
  local:  %any
  remote: 192.168.0.2
  local public key authentication:
    id: moon.strongswan.org
  remote public key authentication:
    id: sun.strongswan.org
  net-net: TUNNEL, rekeying every 3600s
    local:  10.1.0.0/16
    remote: 10.2.0.0/16
  host-host: TUNNEL, rekeying every 3600s
    local:  dynamic
    remote: dynamic
"""

LEGACY_STATUSALL_TEXT = """\
Security Associations (1 up, 0 connecting):
     net-net[1]: ESTABLISHED 8 minutes ago, 10.0.0.1[moon]...10.0.0.2[sun]
     net-net{1}:  INSTALLED, TUNNEL, reqid 1, ESP SPIs: c2e9d4bb_i cb3b58b8_o
     net-net{1}:   10.1.0.0/16 === 10.2.0.0/16
"""

MIXED_FORMATS_TEXT = """\
CHILD_SA office{4} established
  in: 1,234,567 bytes, 890 packets
  out: 2,000 bytes, 20 packets
child 'roadwarrior' installed
  in: bytes 100, packets 3
  out: bytes 200, packets 6
  lab: INSTALLED, TUNNEL
  in bytes 5 packets 1
Oct 19 12:00:00 charon: 10[IKE] installed CHILD_SA 'branch' with SPIs
  dmz: ROUTED, TUNNEL, reqid 7
"""


class FakeRunner(SwanctlRunner):
    """SwanctlRunner that answers from canned output instead of a subprocess."""

    def __init__(self, outputs: t.Optional[t.Dict[str, t.Union[str, Exception]]] = None) -> None:
        super().__init__(binary="swanctl", timeout=1)
        self.outputs = outputs or {}
        self.calls: t.List[t.Tuple[str, ...]] = []

    def run(self, *args: str) -> str:
        self.calls.append(args)
        out = self.outputs.get(args[0], "")
        if isinstance(out, Exception):
            raise out
        return out


def process_failure(args: str, output: str = "connecting to 'unix:///var/run/charon.vici' failed") -> ExternalProcessFailure:
    return ExternalProcessFailure(["swanctl", args], output=output, returncode=1)


@pytest.fixture
def list_sas_text() -> str:
    return LIST_SAS_TEXT


@pytest.fixture
def list_conns_text() -> str:
    return LIST_CONNS_TEXT


@pytest.fixture
def mixed_formats_text() -> str:
    return MIXED_FORMATS_TEXT


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner({"--list-sas": LIST_SAS_TEXT, "--list-conns": LIST_CONNS_TEXT})
