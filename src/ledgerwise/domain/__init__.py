"""Domain layer for ledgerwise application.

Services are imported from their own modules, e.g.
``from ledgerwise.domain.ingestion import ImportService``.
"""
