"""Media Type Matching — parse Accept/Content-Type values and test them against declared sets.

Invariants:
    - All functions are PURE: no IO, no exceptions for bad input
    - Malformed entries (no '/') are dropped, never raised
    - Matching compares type/subtype only; parameters (q, charset, ...) are ignored
    - A wildcard on either side (*/* or type/*) subsumes the concrete side

Design Decisions:
    - Specificity is a small integer scale so ActionTable can rank candidates
      without knowing media-type grammar: */* < type/* < plain subtype < vendor/suffixed subtype
    - Frozen dataclass: MediaType values are hashable and safe to share across requests
"""

from dataclasses import dataclass
from typing import Iterable

WILDCARD = "*"

SPECIFICITY_ANY = 0
SPECIFICITY_TYPE_WILDCARD = 1
SPECIFICITY_GENERIC = 2
SPECIFICITY_VENDOR = 3


@dataclass(frozen=True)
class MediaType:
    """A parsed `type/subtype[;params]` value."""

    type: str
    subtype: str
    params: tuple[tuple[str, str], ...] = ()

    @property
    def essence(self) -> str:
        return f"{self.type}/{self.subtype}"

    @property
    def is_wildcard(self) -> bool:
        return self.type == WILDCARD or self.subtype == WILDCARD

    @property
    def specificity(self) -> int:
        if self.type == WILDCARD:
            return SPECIFICITY_ANY
        if self.subtype == WILDCARD:
            return SPECIFICITY_TYPE_WILDCARD
        if _is_vendor_subtype(self.subtype):
            return SPECIFICITY_VENDOR
        return SPECIFICITY_GENERIC

    def __str__(self) -> str:
        return self.essence


def _is_vendor_subtype(subtype: str) -> bool:
    return (
        "+" in subtype
        or subtype.startswith("vnd.")
        or subtype.startswith("vendor.")
        or subtype.startswith("x.")
    )


def parse_media_type(value: str) -> MediaType | None:
    """Parse one media type. Returns None when the value is malformed."""
    if not value:
        return None
    essence, *raw_params = value.split(";")
    essence = essence.strip().lower()
    if essence.count("/") != 1:
        return None
    type_, subtype = (part.strip() for part in essence.split("/"))
    if not type_ or not subtype:
        return None
    if type_ == WILDCARD and subtype != WILDCARD:
        return None
    params = []
    for raw in raw_params:
        name, sep, param_value = raw.partition("=")
        if sep and name.strip():
            params.append((name.strip().lower(), param_value.strip().strip('"')))
    return MediaType(type_, subtype, tuple(params))


def parse_header(header_value: str | None) -> list[MediaType]:
    """Split a comma-separated header into parsed candidates, dropping malformed entries."""
    if not header_value:
        return []
    parsed = (parse_media_type(part) for part in header_value.split(","))
    return [media_type for media_type in parsed if media_type is not None]


def parse_declared(declared: Iterable[str]) -> tuple[MediaType, ...]:
    """Parse a handler's declared media types. Malformed declarations are a programmer error."""
    result = []
    for value in declared:
        media_type = parse_media_type(value)
        if media_type is None:
            raise ValueError(f"Invalid declared media type: {value!r}")
        result.append(media_type)
    return tuple(result)


def is_compatible(candidate: MediaType, declared: MediaType) -> bool:
    """True if the two media types name the same format, honoring wildcards on either side."""
    if WILDCARD in (candidate.type, declared.type):
        return True
    if candidate.type != declared.type:
        return False
    return (
        WILDCARD in (candidate.subtype, declared.subtype)
        or candidate.subtype == declared.subtype
    )


def best_match(
    header_value: str | None, declared: Iterable[MediaType],
) -> tuple[int, MediaType] | None:
    """Return (score, negotiated media type) for the strongest compatible pair, or None.

    Score is the specificity of the more general side of the pair, so `*/*`
    against a vendor type scores as a wildcard match while an exact vendor
    request scores as a vendor match.
    """
    declared = tuple(declared)
    best: tuple[int, MediaType] | None = None
    for candidate in parse_header(header_value):
        for entry in declared:
            if not is_compatible(candidate, entry):
                continue
            score = min(candidate.specificity, entry.specificity)
            negotiated = candidate if entry.is_wildcard and not candidate.is_wildcard else entry
            if best is None or score > best[0]:
                best = (score, negotiated)
    return best


def matches(header_value: str | None, declared: Iterable[str | MediaType]) -> bool:
    """True iff any header candidate is compatible with any declared entry."""
    parsed = [
        entry if isinstance(entry, MediaType) else parse_media_type(entry)
        for entry in declared
    ]
    return best_match(header_value, [p for p in parsed if p is not None]) is not None
