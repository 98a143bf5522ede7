"""Message/sidecar file access for signatures persisted next to the signed file."""

from __future__ import annotations

from pathlib import Path

from plainrsa.crypto.errors import InvalidArgument
from plainrsa.crypto.numeric import to_decimal

SIGNED_MARKER = "Signed"


def signed_path(path: str | Path) -> Path:
    """``doc.txt`` -> ``docSigned.txt``; only the file name is touched."""
    path = Path(path)
    name = path.name
    dot = name.rfind(".")
    if dot == -1:
        raise InvalidArgument(f"file name has no extension: {name!r}")
    return path.with_name(name[:dot] + SIGNED_MARKER + name[dot:])


class SidecarFiles:
    def read_message(self, path: str | Path) -> bytes:
        return Path(path).read_bytes()

    def read_signature(self, path: str | Path) -> str:
        # undecodable bytes become U+FFFD and fail signature parsing
        return signed_path(path).read_text(encoding="ascii", errors="replace")

    def write_signature(self, path: str | Path, signature: int) -> Path:
        out = signed_path(path)
        out.write_text(to_decimal(signature), encoding="ascii")
        return out


__all__ = ["SIGNED_MARKER", "SidecarFiles", "signed_path"]
