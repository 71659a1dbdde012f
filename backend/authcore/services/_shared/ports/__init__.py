"""
authcore.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing and refresh-token persistence.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, the abstraction for signing and
    verifying access/refresh tokens.

- :mod:`refresh_ledger`:
    Defines :class:`~.RefreshLedger` and :class:`~.LedgerEntry`, the
    abstraction over the refresh-token ledger.

Design Notes
------------
Concrete adapters live under ``authcore.infra`` (token codec) and
``authcore.repositories`` (SQLAlchemy ledger).
"""

from __future__ import annotations

from .refresh_ledger import LedgerEntry, RefreshLedger
from .token_provider import TokenProvider

__all__ = [
    "LedgerEntry",
    "RefreshLedger",
    "TokenProvider",
]
