import pytest

from tgrid.osc7 import Osc7Error, parse_osc7_cwd


def test_localhost_path():
    assert parse_osc7_cwd("file://localhost/home/user", "box") == "/home/user"


def test_empty_host():
    assert parse_osc7_cwd("file:///tmp", "box") == "/tmp"


def test_empty_uri_resets():
    assert parse_osc7_cwd("", "box") == ""


def test_missing_path_resets():
    assert parse_osc7_cwd("file://localhost", "box") == ""


def test_own_hostname_accepted():
    assert parse_osc7_cwd("file://box/srv", "box") == "/srv"


def test_other_host_ignored():
    assert parse_osc7_cwd("file://elsewhere/srv", "box") is None


def test_userinfo_and_port_are_stripped():
    assert parse_osc7_cwd("file://user@box:22/srv", "box") == "/srv"


def test_percent_decoding():
    assert parse_osc7_cwd("file:///a%20b", "box") == "/a b"
    assert parse_osc7_cwd("file:///a%zz", "box") == "/a%zz"


def test_encoded_scheme_is_decoded_first():
    assert parse_osc7_cwd("%66ile:///x", "box") == "/x"


@pytest.mark.parametrize("uri", ["http://localhost/x", "fil", "file:/x", "file:x"])
def test_invalid_uris_raise(uri):
    with pytest.raises(Osc7Error):
        parse_osc7_cwd(uri, "box")


def test_too_long_raises():
    with pytest.raises(Osc7Error):
        parse_osc7_cwd("file:///" + "a" * 5000, "box")