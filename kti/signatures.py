# kti/signatures.py

"""
Magic-number detection over the first bytes of a file.

The table below is ordered and the first matching rule wins. Container
rules (RIFF, ISO BMFF) are two-stage: once the outer signature matches,
the inner tag alone decides the result, falling back to unknown.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from .model import DetectionResult, Outcome

HEADER_SIZE = 32

# --- basic MIME/extension helpers ------------------------------------------------

_EXT_MIME = {
    "gif": "image/gif",
    "mp3": "audio/mpeg",
    "png": "image/png",
    "pdf": "application/pdf",
    "ogg": "audio/ogg",
    "mkv": "video/x-matroska",
    "flac": "audio/flac",
    "jpg": "image/jpeg",
    "webp": "image/webp",
    "wav": "audio/wav",
    "mov": "video/quicktime",
    "mp4": "video/mp4",
}


def _mime_of(ext: str) -> str:
    """Return the MIME type for a given file extension."""
    return _EXT_MIME.get(ext, "application/octet-stream")


def _result(ext: Optional[str], reason: str) -> DetectionResult:
    if ext is None:
        return DetectionResult(outcome=Outcome.UNKNOWN, reason=reason)
    return DetectionResult(
        outcome=Outcome.DETECTED,
        ext=ext,
        mime=_mime_of(ext),
        reason=reason,
    )


# --- signature table ------------------------------------------------------------


@dataclass(frozen=True)
class SignatureRule:
    """One row of the signature table.

    ``patterns`` are alternatives compared at ``offset``. A plain rule maps to
    ``ext``; a container rule carries ``subtypes``, looked up by the bytes in
    ``subtype_range`` once the outer pattern matched. ``min_length`` guards
    rules that need more of the buffer than the pattern itself.
    """
    name: str
    patterns: Tuple[bytes, ...]
    ext: Optional[str] = None
    offset: int = 0
    min_length: int = 0
    subtypes: Dict[bytes, str] = field(default_factory=dict)
    subtype_range: Tuple[int, int] = (8, 12)

    def matches(self, head: bytes) -> bool:
        for pattern in self.patterns:
            end = self.offset + len(pattern)
            if len(head) < max(end, self.min_length):
                continue
            if head[self.offset:end] == pattern:
                return True
        return False

    def resolve(self, head: bytes) -> Optional[str]:
        if not self.subtypes:
            return self.ext
        start, end = self.subtype_range
        return self.subtypes.get(head[start:end])


RIFF_TYPES = {
    b"WEBP": "webp",
    b"WAVE": "wav",
}

ISO_BRANDS = {
    b"qt  ": "mov",
    b"avc1": "mp4",
    b"isom": "mp4",
    b"mmp4": "mp4",
    b"mp41": "mp4",
    b"mp42": "mp4",
    b"mp71": "mp4",
    b"msnv": "mp4",
    b"M4V ": "mp4",
}

SIGNATURES: Tuple[SignatureRule, ...] = (
    SignatureRule("gif-signature", (b"GIF87a", b"GIF89a"), "gif"),
    SignatureRule("mp3-framesync-or-id3", (b"\xFF\xFB", b"\xFF\xF3", b"\xFF\xF2", b"ID3"), "mp3"),
    SignatureRule("png-signature", (b"\x89PNG\r\n\x1a\n",), "png"),
    SignatureRule("pdf-header", (b"%PDF-",), "pdf"),
    SignatureRule("ogg-capture", (b"OggS",), "ogg"),
    SignatureRule("matroska-ebml", (b"\x1A\x45\xDF\xA3",), "mkv"),
    SignatureRule("flac-marker", (b"fLaC",), "flac"),
    SignatureRule("jpeg-soi", (b"\xFF\xD8\xFF",), "jpg"),
    SignatureRule("riff-container", (b"RIFF",), min_length=12, subtypes=RIFF_TYPES),
    SignatureRule("iso-bmff-ftyp", (b"ftyp",), offset=4, min_length=12, subtypes=ISO_BRANDS),
)


# --- public API -----------------------------------------------------------------


def detect(head: bytes) -> DetectionResult:
    """Detect the file type implied by a header buffer.

    Only the first ``HEADER_SIZE`` bytes are looked at. Never raises: a
    buffer that matches no rule, or a container with an unrecognized inner
    tag, gives an ``UNKNOWN`` result.
    """
    head = bytes(head[:HEADER_SIZE])
    for rule in SIGNATURES:
        if rule.matches(head):
            ext = rule.resolve(head)
            return _result(ext, rule.name if ext else f"{rule.name}-unknown-subtype")
    return _result(None, "unknown")


def read_header(path: Path, size: int = HEADER_SIZE) -> bytes:
    """Read up to ``size`` bytes from the start of a file. OS errors propagate."""
    with path.open("rb") as f:
        return f.read(size)


def detect_filetype(path: Path) -> DetectionResult:
    """Detect the file type of a given path based on its magic bytes.

    Failure to open or read the file is reported as a ``READ_ERROR`` result
    instead of an exception.
    """
    try:
        head = read_header(path)
    except OSError as exc:
        return DetectionResult(
            outcome=Outcome.READ_ERROR,
            reason="read-error",
            error=f"{type(exc).__name__}: {exc}",
        )
    return detect(head)
