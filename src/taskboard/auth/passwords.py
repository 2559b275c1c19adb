# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from taskboard.config import DEFAULT_HASH_MEMORY_COST, DEFAULT_HASH_TIME_COST


def make_hasher(
    time_cost: int = DEFAULT_HASH_TIME_COST,
    memory_cost: int = DEFAULT_HASH_MEMORY_COST,
) -> PasswordHasher:
    return PasswordHasher(time_cost=time_cost, memory_cost=memory_cost)


def hash_password(hasher: PasswordHasher, plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return hasher.hash(plain)


def verify_password(hasher: PasswordHasher, hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return hasher.verify(hash_value, plain)
    except (VerificationError, InvalidHashError):
        return False
