"""Exceptions raised when a ledger operation is rejected."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every rejected bid, trade or store operation.

    ``message`` is the human-readable reason shown to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SelfTradeError(LedgerError):
    pass


class InvalidAmountError(LedgerError):
    pass


class InsufficientFundsError(LedgerError):
    pass


class PlayerNotFoundError(LedgerError):
    pass


class UnverifiedOwnershipError(LedgerError):
    pass


class NotOriginalOwnerError(LedgerError):
    pass


class TeamNotFoundError(LedgerError):
    pass


class UnknownPlayerError(LedgerError):
    """Raised when a bid names a player missing from the player catalog."""


class ConflictError(LedgerError):
    """A concurrent write changed a team record between snapshot and commit."""


class StoreUnavailableError(LedgerError):
    """The backing store failed for a reason other than write contention."""
