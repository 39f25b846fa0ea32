"""
Sealed Tally - Confidential Ballot Tallying Engine

An authority defines time-bounded proposals, eligible participants cast
a secret yes/no choice exactly once, and choices are folded into running
encrypted totals. Plaintext totals exist only after the authority
formally closes a proposal.

Guarantees:
- One accepted ballot per participant per proposal
- Votes accepted only inside [start_time, end_time)
- Encrypted counters are never mutated after closing
- Individual choices are never logged, emitted, or decrypted
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
