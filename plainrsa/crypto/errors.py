"""Error kinds raised by the signature primitives.

All of them derive from ValueError so callers that already guard RSA calls
with ``except ValueError`` keep working.
"""

from __future__ import annotations


class SignatureError(ValueError):
    """Base class for plainrsa errors."""


class InvalidKeyArgument(SignatureError):
    """p/q not prime, d out of range, or d not coprime with phi(n)."""


class ModulusTooSmall(SignatureError):
    """Digest or signature magnitude does not fit below the modulus."""


class InvalidSignatureFormat(SignatureError):
    """Persisted signature is blank or not a decimal integer."""


class NoInverseExists(SignatureError):
    """Modular inverse requested for non-coprime inputs."""


class InvalidArgument(SignatureError):
    """Argument that cannot be used as given (e.g. a path without extension)."""


__all__ = [
    "SignatureError",
    "InvalidKeyArgument",
    "ModulusTooSmall",
    "InvalidSignatureFormat",
    "NoInverseExists",
    "InvalidArgument",
]
