"""Version Resolution — parse the requested API version and narrow a route group to it.

Invariants:
    - All functions are PURE: no IO, no async
    - Exactly one version source is active per deployment (VersionPolicy.source)
    - Absent token -> policy default version
    - Non-exact policy: highest declared version <= requested wins
    - Handlers declaring no versions ("any") always survive narrowing

Design Decisions:
    - ApiVersion is an ordered frozen dataclass: total ordering comes from (major, minor)
    - Narrowing works on anything exposing `.versions` so this module never imports
      select_action (no import cycle)
"""

import re
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence, TypeVar

from library_api.core.domain_types import VersionSource
from library_api.core.errors import MalformedInputError, NoMatchingVersionError

_VERSION_RE = re.compile(r"^[vV]?(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True, order=True)
class ApiVersion:
    """A (major, minor) API version."""

    major: int
    minor: int = 0

    @classmethod
    def parse(cls, token: str) -> "ApiVersion":
        """Parse '1', '1.0', 'v2.0'. Raises ValueError on anything else."""
        match = _VERSION_RE.match(token.strip())
        if not match:
            raise ValueError(f"Invalid API version: {token!r}")
        return cls(int(match.group(1)), int(match.group(2) or 0))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class _Versioned(Protocol):
    versions: frozenset[ApiVersion] | None


V = TypeVar("V", bound=_Versioned)


@dataclass(frozen=True)
class VersionPolicy:
    """Deployment-wide versioning configuration. Built once at startup."""

    default: ApiVersion = ApiVersion(1, 0)
    source: VersionSource = VersionSource.PATH
    path_param: str = "version"
    header_name: str = "api-version"
    query_param: str = "api-version"
    exact_match: bool = False

    def extract_token(
        self,
        path_params: Mapping[str, str],
        headers: Mapping[str, str],
        query_params: Mapping[str, str],
    ) -> str | None:
        """Read the raw version token from the active source."""
        if self.source is VersionSource.PATH:
            return path_params.get(self.path_param)
        if self.source is VersionSource.HEADER:
            return headers.get(self.header_name)
        return query_params.get(self.query_param)

    def requested_version(self, token: str | None) -> ApiVersion:
        """Token -> ApiVersion. Missing token means the default version."""
        if token is None or not token.strip():
            return self.default
        try:
            return ApiVersion.parse(token)
        except ValueError:
            raise MalformedInputError(
                f"'{token}' is not a valid API version",
                fields={"api-version": ["Expected 'major' or 'major.minor'."]},
            )


def declared_versions(descriptors: Sequence[_Versioned]) -> list[ApiVersion]:
    """Sorted union of versions declared on a route group."""
    found: set[ApiVersion] = set()
    for descriptor in descriptors:
        if descriptor.versions:
            found.update(descriptor.versions)
    return sorted(found)


def resolve_version(
    requested: ApiVersion, descriptors: Sequence[V], exact_match: bool = False,
) -> tuple[V, ...]:
    """Narrow a route group to the descriptors serving `requested`.

    Raises NoMatchingVersionError when the group is non-empty and nothing
    (not even an any-version descriptor) remains.
    """
    declared = declared_versions(descriptors)
    if exact_match:
        target = requested if requested in declared else None
    else:
        target = max((v for v in declared if v <= requested), default=None)

    narrowed = tuple(
        d for d in descriptors
        if d.versions is None or (target is not None and target in d.versions)
    )
    if descriptors and not narrowed:
        raise NoMatchingVersionError(str(requested), [str(v) for v in declared])
    return narrowed
