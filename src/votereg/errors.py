"""
Exceptions raised by votereg.
"""

from __future__ import annotations


class VoteRegError(Exception):
    """Base class for votereg errors."""

    pass


class FeeOracleError(VoteRegError):
    """The fee oracle rejected its inputs or broke the linear fee assumption."""

    pass


class MetadataError(VoteRegError, ValueError):
    """Transaction metadata does not satisfy the ledger's metadata rules."""

    pass


class InsufficientFundsError(VoteRegError):
    """
    Every candidate source was consumed without covering the fee.

    Attributes:
        available: Total lovelace of the consumed sources
        required: Fee target for that many inputs
        consumed: Number of sources consumed
    """

    def __init__(self, available: int, required: int, consumed: int):
        self.available = available
        self.required = required
        self.consumed = consumed
        super().__init__(
            f"Insufficient funds: need {required} lovelace for {consumed} input(s), "
            f"have {available}"
        )
