"""Textbook RSA signatures (no padding, deterministic).

The signature of a message is ``h^d mod n`` where ``h`` is the digest produced
by the bound hash. Digests and signatures that do not fit below ``n`` are
rejected, never reduced.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Tuple, runtime_checkable

from .errors import InvalidKeyArgument, InvalidSignatureFormat, ModulusTooSmall
from .hashing import DefaultFallback, HashFunction, HashSelection, bind_hash
from .numeric import extended_inverse, from_decimal, gcd, is_prime, mod_pow
from plainrsa.files.sidecar import SidecarFiles

_DECIMAL = re.compile(r"\s*[+-]?[0-9]+\s*")


@runtime_checkable
class DigitalSignatureAlgorithm(Protocol):
    def sign(self, path: str | Path) -> Tuple[int, int]:
        ...

    def verify(self, path: str | Path) -> bool:
        ...


@dataclass(frozen=True)
class RSAPublic:
    n: int
    e: int


@dataclass(frozen=True)
class RSAPrivate:
    n: int
    d: int


@dataclass(frozen=True)
class KeyMaterial:
    n: int
    d: int
    e: int

    @property
    def public(self) -> RSAPublic:
        return RSAPublic(n=self.n, e=self.e)

    @property
    def private(self) -> RSAPrivate:
        return RSAPrivate(n=self.n, d=self.d)


def parse_signature(text: str, modulus: int | None = None) -> int:
    """Parse persisted signature text.

    With ``modulus`` given, digit strings too long to be below it are rejected
    before conversion.
    """
    if not text or text.isspace():
        raise InvalidSignatureFormat("signature file is blank")
    if not _DECIMAL.fullmatch(text):
        raise InvalidSignatureFormat("signature is not a decimal integer")
    if modulus is not None:
        digits = text.strip().lstrip("+-").lstrip("0")
        # 10**(k-1) > 2**bits once k > bits // 3 + 2
        if len(digits) > modulus.bit_length() // 3 + 2:
            raise ModulusTooSmall(f"signature has {len(digits)} digits, modulus has {modulus.bit_length()} bits")
    return from_decimal(text)


def check_key_arguments(p: int, q: int, d: int) -> None:
    if not is_prime(p) or not is_prime(q):
        raise InvalidKeyArgument("p and q must be prime numbers")
    phi = (p - 1) * (q - 1)
    # d == 1 makes the signature equal to the digest; d >= phi breaks the inversion
    if d < 2 or d > phi - 1:
        raise InvalidKeyArgument(f"private exponent must satisfy 2 <= d <= {phi - 1}")
    if gcd(d, phi) != 1:
        raise InvalidKeyArgument("private exponent must be coprime with (p - 1) * (q - 1)")


class RsaSignature:
    """RSA signer/verifier bound to one key and one hash.

    Instances are read-only after construction; ``sign`` and ``verify`` may be
    called any number of times, from several threads if the file collaborator
    allows it.
    """

    def __init__(
        self,
        p: int,
        q: int,
        private_exponent: int,
        hash_selection: HashSelection = DefaultFallback(),
        validate: bool = True,
        files: SidecarFiles | None = None,
    ) -> None:
        if validate:
            check_key_arguments(p, q, private_exponent)
        n = p * q
        e = extended_inverse((p - 1) * (q - 1), private_exponent)
        self._bind(KeyMaterial(n=n, d=private_exponent, e=e), hash_selection, files)

    def _bind(self, key: KeyMaterial, hash_selection: HashSelection, files: SidecarFiles | None) -> None:
        self._key = key
        self._hash = bind_hash(hash_selection, key.n)
        self._files = files if files is not None else SidecarFiles()

    @classmethod
    def from_key(
        cls,
        key: KeyMaterial,
        hash_selection: HashSelection = DefaultFallback(),
        files: SidecarFiles | None = None,
    ) -> "RsaSignature":
        """Wrap existing key material; no primality or range checks are possible."""
        self = cls.__new__(cls)
        self._bind(key, hash_selection, files)
        return self

    @property
    def key(self) -> KeyMaterial:
        return self._key

    @property
    def public_key(self) -> RSAPublic:
        return self._key.public

    @property
    def modulus(self) -> int:
        return self._key.n

    @property
    def hash_function(self) -> HashFunction:
        return self._hash

    def digest(self, message: bytes) -> int:
        return self._hash.digest(message)

    def _check_fits(self, value: int) -> None:
        if abs(value) >= self._key.n:
            raise ModulusTooSmall(f"modulus {self._key.n} too small for value of {abs(value).bit_length()} bits")

    def hash_image(self, value: int, exponent: int) -> int:
        self._check_fits(value)
        return mod_pow(value, exponent, self._key.n)

    def sign_message(self, message: bytes) -> Tuple[int, int]:
        """Return (signature, digest) for ``message`` without touching files."""
        h = self.digest(message)
        return self.hash_image(h, self._key.d), h

    def verify_message(self, message: bytes, signature: int) -> bool:
        h = self.digest(message)
        self._check_fits(h)
        return h == self.hash_image(signature, self._key.e)

    def sign(self, path: str | Path) -> Tuple[int, int]:
        """Sign the file at ``path`` and write the signature to its sidecar."""
        s, h = self.sign_message(self._files.read_message(path))
        self._files.write_signature(path, s)
        return s, h

    def verify(self, path: str | Path) -> bool:
        text = self._files.read_signature(path)
        message = self._files.read_message(path)
        return self.verify_message(message, parse_signature(text, self._key.n))


__all__ = [
    "DigitalSignatureAlgorithm",
    "KeyMaterial",
    "RSAPrivate",
    "RSAPublic",
    "RsaSignature",
    "check_key_arguments",
    "parse_signature",
]
