"""Auction ledger for a fantasy cricket league: teams, bids, trades and standings."""

__version__ = "0.1.0"
