"""Hash capability consumed by the RSA signer.

A hash selection is one of two variants, resolved once when the signer is
built:

``ConfiguredHash(algorithm)``
    hashlib digest read as a big-endian integer and reduced modulo n, so it
    is always signable.

``DefaultFallback()``
    plain MD5 read as an integer with no reduction. Moduli below 2**128 can
    therefore be too small for it; the signer rejects such digests instead
    of truncating them.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Protocol, Union


@dataclass(frozen=True)
class ConfiguredHash:
    algorithm: str = "sha256"


@dataclass(frozen=True)
class DefaultFallback:
    pass


HashSelection = Union[ConfiguredHash, DefaultFallback]


class HashFunction(Protocol):
    def digest(self, message: bytes) -> int:
        ...


def _to_int(raw: bytes) -> int:
    return int.from_bytes(raw, "big")


@dataclass(frozen=True)
class ModularHash:
    algorithm: str
    modulus: int

    def __post_init__(self) -> None:
        if self.modulus < 2:
            raise ValueError("modulus too small for hashing")
        if self.algorithm.startswith("shake_"):
            raise ValueError(f"variable-length hash not supported: {self.algorithm}")
        # raises ValueError for unknown names
        hashlib.new(self.algorithm)

    def digest(self, message: bytes) -> int:
        return _to_int(hashlib.new(self.algorithm, message).digest()) % self.modulus


@dataclass(frozen=True)
class FallbackHash:
    def digest(self, message: bytes) -> int:
        return _to_int(hashlib.md5(message).digest())


def bind_hash(selection: HashSelection, modulus: int) -> HashFunction:
    if isinstance(selection, ConfiguredHash):
        return ModularHash(selection.algorithm, modulus)
    if isinstance(selection, DefaultFallback):
        return FallbackHash()
    raise TypeError(f"unknown hash selection: {selection!r}")


def digest(message: bytes, modulus: int, selection: HashSelection = DefaultFallback()) -> int:
    return bind_hash(selection, modulus).digest(message)


__all__ = [
    "ConfiguredHash",
    "DefaultFallback",
    "HashSelection",
    "HashFunction",
    "ModularHash",
    "FallbackHash",
    "bind_hash",
    "digest",
]
