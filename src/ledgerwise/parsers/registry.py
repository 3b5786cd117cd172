"""Registry of statement parsers keyed by issuer."""

import csv
from typing import Optional

from ledgerwise.domain.errors import UnsupportedFormatError, no_parser_for_issuer
from ledgerwise.parsers.base import StatementParser


def header_tokens(content: str) -> list[str]:
    """Split the first line of a statement into header tokens."""
    first_line = content.lstrip("\ufeff").splitlines()[0] if content.strip() else ""
    for tokens in csv.reader([first_line]):
        return [t.strip() for t in tokens]
    return []


class ParserRegistry:
    """Maps issuer identifiers to parser instances.

    New formats are supported by registering another ``StatementParser``;
    lookup and auto-detection do not change.
    """

    def __init__(self, parsers: Optional[list[StatementParser]] = None):
        self._parsers: dict[str, StatementParser] = {}
        for parser in parsers or []:
            self.register(parser)

    def register(self, parser: StatementParser) -> None:
        """Register a parser under its issuer, replacing any previous one."""
        self._parsers[parser.issuer.lower()] = parser

    def get(self, issuer: str) -> Optional[StatementParser]:
        """Get parser by issuer, or None."""
        return self._parsers.get(issuer.lower())

    def resolve(self, issuer: str) -> StatementParser:
        """Get parser by issuer.

        Raises:
            UnsupportedFormatError: If no parser is registered for the issuer
        """
        parser = self.get(issuer)
        if parser is None:
            raise UnsupportedFormatError(no_parser_for_issuer(issuer))
        return parser

    def auto_detect(self, headers: list[str]) -> Optional[StatementParser]:
        """Return the first registered parser that recognizes the headers."""
        for parser in self._parsers.values():
            if parser.detect_format(headers):
                return parser
        return None

    @property
    def issuers(self) -> list[str]:
        return list(self._parsers)
