"""Tests for configured child discovery."""

from swanui.swanctl_parsers import list_conns


def test_parse_tunnel_children(list_conns_text: str):
    assert list_conns.parse(list_conns_text) == ["host-host", "net-net"]


def test_parse_site_children():
    text = "  site-b: TUNNEL, rekeying every 3600s\n  site-a: TUNNEL, rekeying every 3600s\n"
    assert list_conns.parse(text) == ["site-a", "site-b"]


def test_unindented_tunnel_line_is_not_a_child():
    assert list_conns.parse("gw: TUNNEL\n") == []


def test_all_styles_are_unioned():
    text = "\n".join([
        "  alpha: TUNNEL, rekeying every 3600s",
        "children: beta, gamma delta",
        "  child epsilon",
        "Child alpha",
    ])
    assert list_conns.parse(text) == ["alpha", "beta", "delta", "epsilon", "gamma"]


def test_fallback_to_list_sas_when_conns_empty(list_sas_text: str):
    assert list_conns.parse_children("", list_sas_text) == ["host-host", "net-net"]


def test_no_fallback_when_conns_has_names(list_conns_text: str):
    sas = "  other{1}:  INSTALLED, TUNNEL\n"
    assert list_conns.parse_children(list_conns_text, sas) == ["host-host", "net-net"]


def test_header_styles_deduplicate_across_sources():
    sas = "\n".join([
        "  site-a{1}:  INSTALLED, TUNNEL, reqid 1",
        "  site-a: #1, reqid 1, INSTALLED, TUNNEL, ESP:AES_CBC-128",
        "CHILD_SA site-a{2} established",
    ])
    assert list_conns.parse_children("", sas) == ["site-a"]

    conns = "  site-a: TUNNEL, rekeying every 3600s\nchildren: site-a, site-a\n"
    assert list_conns.parse_children(conns, sas) == ["site-a"]


def test_fallback_ignores_state_and_log_lines():
    sas = "Oct 19 12:00:00 charon: 10[IKE] installed CHILD_SA 'ghost' with SPIs\n  lab: INSTALLED, TUNNEL\n"
    assert list_conns.parse_children("", sas) == []


def test_empty_or_failed_input_yields_empty_list():
    assert list_conns.parse_children("", "") == []
    assert list_conns.parse_children("connecting to 'unix:///var/run/charon.vici' failed: No such file") == []


def test_normalize_names():
    assert list_conns.normalize_names([" b ", "a", "", "  ", "b"]) == ["a", "b"]
