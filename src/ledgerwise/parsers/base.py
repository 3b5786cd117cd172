"""Abstract statement parser interface."""

from abc import ABC, abstractmethod

from ledgerwise.domain.entities import ParsedRow


def normalize_header(header: str) -> str:
    """Lower-case a header token and collapse its whitespace."""
    return " ".join(header.strip().strip('"').split()).lower()


class StatementParser(ABC):
    """Converter from one issuer's statement export to ``ParsedRow`` objects.

    Implementations declare an ``issuer`` identifier and are added to a
    ``ParserRegistry``; the registry never needs to know about concrete
    parser classes.
    """

    issuer: str

    @abstractmethod
    def detect_format(self, headers: list[str]) -> bool:
        """Return True if the header tokens look like this issuer's export."""
        pass

    @abstractmethod
    def parse(self, content: str) -> list[ParsedRow]:
        """Parse raw statement text into normalized rows.

        Rows missing required fields or holding unparsable dates or amounts
        are dropped, not reported.
        """
        pass
