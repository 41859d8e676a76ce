import logging

import pytest

from pingpal.scan.errors import ProtocolTableError
from pingpal.scan.protocols import UNKNOWN_PROTOCOL, ProtocolResolver, load_protocol_table


def test_packaged_table_resolves_well_known_ports():
    resolver = ProtocolResolver()
    assert resolver.loaded
    assert resolver.lookup(22) == "SSH (Secure Shell)"
    assert resolver.lookup(80).startswith("HTTP")
    assert resolver.lookup(64999) == UNKNOWN_PROTOCOL
    assert len(resolver) > 50


def test_missing_table_warns_once(tmp_path, caplog):
    resolver = ProtocolResolver(tmp_path / "missing.csv")
    with caplog.at_level(logging.WARNING, logger="pingpal.scan.protocols"):
        assert resolver.lookup(22) == UNKNOWN_PROTOCOL
        assert resolver.lookup(80) == UNKNOWN_PROTOCOL
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert not resolver.loaded
    assert isinstance(resolver.load_error, ProtocolTableError)


def test_load_protocol_table_skips_header_and_blank_rows(tmp_path):
    path = tmp_path / "ports.csv"
    path.write_text("port,protocol\n21,FTP\n\n 25 , SMTP \n", encoding="utf-8")
    assert load_protocol_table(path) == {21: "FTP", 25: "SMTP"}


def test_load_protocol_table_rejects_bad_rows(tmp_path):
    path = tmp_path / "ports.csv"
    path.write_text("port,protocol\nssh,SSH\n", encoding="utf-8")
    with pytest.raises(ProtocolTableError):
        load_protocol_table(path)
