"""Number-theory helpers for textbook RSA.

Everything works on plain Python ints. Miller–Rabin is deterministic below
3.3e24 thanks to the fixed bases; above that random bases are added, so
``is_prime`` is a probabilistic test for large inputs.
"""

from __future__ import annotations

import os
import secrets
from typing import Tuple

from .errors import NoInverseExists


# First 13 primes: deterministic Miller–Rabin for n < 3317044064679887385961981.
_MR_BASES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41]

# 环境变量 PLAINRSA_PRIME_ROUNDS 控制大数的 Miller–Rabin 轮数
PRIME_ROUNDS = int(os.environ.get("PLAINRSA_PRIME_ROUNDS", "16"))


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """Return (g, x, y) such that a*x + b*y == g == gcd(a, b)."""
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    if old_r < 0:
        old_r, old_x, old_y = -old_r, -old_x, -old_y
    return old_r, old_x, old_y


def extended_inverse(modulus_base: int, value: int) -> int:
    """Inverse of ``value`` modulo ``modulus_base`` using extended Euclid."""
    if modulus_base < 1:
        raise NoInverseExists(f"modulus must be positive, got {modulus_base}")
    g, x, _ = extended_gcd(value % modulus_base, modulus_base)
    if g != 1:
        raise NoInverseExists(f"{value} is not invertible modulo {modulus_base}")
    return x % modulus_base


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """Right-to-left square-and-multiply; result lies in [0, modulus)."""
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus < 1:
        raise ValueError("modulus must be positive")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def is_prime(n: int, rounds: int | None = None) -> bool:
    """Miller–Rabin primality test."""
    if n < 2:
        return False
    for p in _MR_BASES:
        if n == p:
            return True
        if n % p == 0:
            return False
    # write n-1 as 2^s * d
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    def witness(a: int) -> bool:
        x = mod_pow(a, d, n)
        if x == 1 or x == n - 1:
            return False
        for _ in range(s - 1):
            x = mod_pow(x, 2, n)
            if x == n - 1:
                return False
        return True

    bases = list(_MR_BASES)
    if rounds is None:
        rounds = PRIME_ROUNDS
    # beyond the deterministic range, add random bases
    if n >= 3317044064679887385961981:
        while len(bases) < rounds:
            candidate = secrets.randbelow(n - 3) + 2
            if candidate not in bases:
                bases.append(candidate)
    return not any(witness(a) for a in bases)


# int <-> str in pieces small enough for sys.get_int_max_str_digits() (minimum 640)
_DECIMAL_CHUNK = 512
_CHUNK_BASE = 10**_DECIMAL_CHUNK


def to_decimal(value: int) -> str:
    """Decimal text of ``value`` with no digit-count limit."""
    if value < 0:
        return "-" + to_decimal(-value)
    parts = []
    while value >= _CHUNK_BASE:
        value, low = divmod(value, _CHUNK_BASE)
        parts.append(str(low).zfill(_DECIMAL_CHUNK))
    parts.append(str(value))
    return "".join(reversed(parts))


def from_decimal(text: str) -> int:
    """Inverse of ``to_decimal``; accepts surrounding whitespace and a sign."""
    text = text.strip()
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text or not (text.isascii() and text.isdigit()):
        raise ValueError("not a decimal integer")
    value = 0
    for i in range(0, len(text), _DECIMAL_CHUNK):
        piece = text[i : i + _DECIMAL_CHUNK]
        value = value * 10 ** len(piece) + int(piece)
    return sign * value


__all__ = ["gcd", "extended_gcd", "extended_inverse", "mod_pow", "is_prime", "to_decimal", "from_decimal", "PRIME_ROUNDS"]
