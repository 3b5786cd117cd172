"""Statement parsers for ledgerwise."""

from ledgerwise.parsers.base import StatementParser
from ledgerwise.parsers.chase import ChaseParser
from ledgerwise.parsers.registry import ParserRegistry, header_tokens


def create_default_registry() -> ParserRegistry:
    """Create a registry holding every built-in issuer parser."""
    return ParserRegistry([ChaseParser()])


__all__ = [
    "StatementParser",
    "ChaseParser",
    "ParserRegistry",
    "header_tokens",
    "create_default_registry",
]
