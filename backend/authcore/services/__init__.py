"""Service layer.

Subpackages
-----------
- ``authcore.services._shared``: base service, errors, shared DTOs and ports.
- ``authcore.services.auth``: token issuance, rotation, request authentication
  and the credential flow (register/login/profile).

Nothing is imported eagerly here: repositories import
``authcore.services._shared.errors`` and must not pull in the unit of work.
"""
