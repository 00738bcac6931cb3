"""
Accounts — registration, login, bearer tokens and the address book.
"""

from atelier.accounts._store import (
    AccountStore,
    Registration,
    AddressDraft,
    Profile,
    to_user,
    to_address,
)
from atelier.accounts.tokens import TokenIssuer
from atelier.accounts.passwords import hash_password, check_password

__all__ = (
    "AccountStore",
    "Registration",
    "AddressDraft",
    "Profile",
    "to_user",
    "to_address",
    "TokenIssuer",
    "hash_password",
    "check_password",
)
