"""
Domain layer - Pure business logic for Sealed Tally.

This layer contains:
- Domain models (Proposal, EncryptedTally, RevealedResult)
- Domain events (proposal and ballot notifications)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from sealed_tally.domain.exceptions import SealedTallyError

__all__: list[str] = ["SealedTallyError"]
