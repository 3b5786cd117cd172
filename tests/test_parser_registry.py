"""Tests for the parser registry."""

import pytest

from ledgerwise.domain.errors import UnsupportedFormatError
from ledgerwise.parsers import ChaseParser, ParserRegistry, create_default_registry, header_tokens
from ledgerwise.parsers.base import StatementParser


class PipeParser(StatementParser):
    """Minimal parser for registry tests."""

    issuer = "pipe"

    def detect_format(self, headers):
        return headers == ["date|desc|amount"]

    def parse(self, content):
        return []


def test_default_registry_has_chase():
    registry = create_default_registry()

    assert registry.issuers == ["chase"]
    assert isinstance(registry.resolve("chase"), ChaseParser)


def test_resolve_is_case_insensitive():
    registry = create_default_registry()

    assert isinstance(registry.resolve("Chase"), ChaseParser)


def test_resolve_unknown_issuer_raises():
    registry = create_default_registry()

    with pytest.raises(UnsupportedFormatError) as excinfo:
        registry.resolve("amex")

    assert "amex" in str(excinfo.value)


def test_get_unknown_issuer_returns_none():
    assert create_default_registry().get("amex") is None


def test_register_new_parser():
    registry = create_default_registry()
    parser = PipeParser()

    registry.register(parser)

    assert registry.resolve("pipe") is parser
    assert registry.issuers == ["chase", "pipe"]


def test_register_replaces_existing_issuer():
    registry = ParserRegistry([ChaseParser()])
    replacement = ChaseParser()

    registry.register(replacement)

    assert registry.resolve("chase") is replacement
    assert len(registry.issuers) == 1


def test_auto_detect_first_match(fixtures_dir):
    registry = ParserRegistry([PipeParser(), ChaseParser()])
    content = (fixtures_dir / "chase_sample.csv").read_text(encoding="utf-8")

    parser = registry.auto_detect(header_tokens(content))

    assert isinstance(parser, ChaseParser)


def test_auto_detect_no_match(fixtures_dir):
    registry = create_default_registry()
    content = (fixtures_dir / "unknown_bank.csv").read_text(encoding="utf-8")

    assert registry.auto_detect(header_tokens(content)) is None


def test_header_tokens():
    assert header_tokens('"Date", Amount ,Memo\n1,2,3\n') == ["Date", "Amount", "Memo"]
    assert header_tokens("") == []
