"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date, parse_timestamp
from ledgerkit.utils.amount_parser import parse_amount, parse_entry_spec
from ledgerkit.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_timestamp", "parse_amount", "parse_entry_spec", "resolve_account"]
