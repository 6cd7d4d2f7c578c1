"""Action Selection — pick exactly one handler among candidates sharing a route.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - ActionTable is built once from a static descriptor list and never mutated
    - Overlapping (version, consumes, produces) declarations within a route group
      raise AmbiguousActionError at construction, never at request time
    - Selection order: route -> version -> Content-Type (body methods) -> Accept -> specificity
    - Result is independent of registration order: a true tie raises instead of
      falling back to "first registered"

Design Decisions:
    - Explicit descriptor table over decorators/reflection: every route, version and
      media type is visible in one data structure (ADR: no convention-over-config)
    - Ranking key (content score, accept score, generality): an exact vendor match beats
      application/json, which beats a wildcard; on a wildcard tie the handler with the
      most generic declared representation is the fallback
    - Missing Accept is treated as */*; missing Content-Type matches nothing
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from library_api.core.domain_types import HttpMethod
from library_api.core.errors import (
    AmbiguousActionError,
    ErrorContext,
    MalformedInputError,
    NoMatchingVersionError,
    NotAcceptableError,
    RouteNotFoundError,
    UnsupportedMediaTypeError,
)
from library_api.core.match_media_types import (
    MediaType,
    best_match,
    is_compatible,
    parse_declared,
    parse_header,
)
from library_api.core.resolve_version import (
    ApiVersion,
    VersionPolicy,
    declared_versions,
    resolve_version,
)

logger = logging.getLogger(__name__)

_PARAM_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
ANY_MEDIA_TYPE = "*/*"


@dataclass(frozen=True)
class HandlerDescriptor:
    """One registered handler: where it lives and what it accepts/produces."""

    name: str
    template: str
    method: HttpMethod
    produces: tuple[MediaType, ...]
    consumes: tuple[MediaType, ...] = ()
    versions: frozenset[ApiVersion] | None = None

    @classmethod
    def declare(
        cls,
        name: str,
        template: str,
        method: HttpMethod,
        *,
        produces: Iterable[str],
        consumes: Iterable[str] = (),
        versions: Iterable[str] | None = None,
    ) -> "HandlerDescriptor":
        """Build a descriptor from plain strings."""
        return cls(
            name=name,
            template=template,
            method=method,
            produces=parse_declared(produces),
            consumes=parse_declared(consumes),
            versions=(
                frozenset(ApiVersion.parse(v) for v in versions)
                if versions is not None else None
            ),
        )


@dataclass(frozen=True)
class RouteGroup:
    """All descriptors sharing a normalized template and HTTP method."""

    template: str
    method: HttpMethod
    descriptors: tuple[HandlerDescriptor, ...]
    pattern: re.Pattern = field(compare=False, repr=False)

    def match(self, path: str) -> dict[str, str] | None:
        found = self.pattern.match(normalize_path(path))
        return found.groupdict() if found else None

    @property
    def supported_versions(self) -> list[str]:
        return [str(v) for v in declared_versions(self.descriptors)]


@dataclass(frozen=True)
class Selection:
    """Outcome of a successful selection."""

    descriptor: HandlerDescriptor
    path_params: dict[str, str]
    api_version: ApiVersion
    response_media_type: MediaType
    supported_versions: list[str]


def normalize_path(path: str) -> str:
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


def normalize_template(template: str) -> str:
    """Case-fold literals and erase parameter names so equivalent templates group together."""
    return _PARAM_RE.sub("{}", normalize_path(template)).lower()


def compile_template(template: str) -> re.Pattern:
    pattern, position = [], 0
    for found in _PARAM_RE.finditer(template):
        pattern.append(re.escape(template[position:found.start()]))
        pattern.append(f"(?P<{found.group(1)}>[^/]+)")
        position = found.end()
    pattern.append(re.escape(template[position:]))
    return re.compile("^" + "".join(pattern) + "$", re.IGNORECASE)


def _media_overlap(left: Sequence[MediaType], right: Sequence[MediaType]) -> bool:
    return any(is_compatible(a, b) for a in left for b in right)


def _version_overlap(left: HandlerDescriptor, right: HandlerDescriptor) -> bool:
    if left.versions is None or right.versions is None:
        return True
    return bool(left.versions & right.versions)


def _overlaps(left: HandlerDescriptor, right: HandlerDescriptor) -> bool:
    if not _version_overlap(left, right):
        return False
    if not _media_overlap(left.produces, right.produces):
        return False
    if left.method.has_body:
        return _media_overlap(left.consumes, right.consumes)
    return True


def _generality(descriptor: HandlerDescriptor) -> int:
    """Higher when the handler declares a more generic representation."""
    declared = descriptor.produces + descriptor.consumes
    return -min((m.specificity for m in declared), default=0)


class ActionTable:
    """Immutable lookup of route groups, validated once at construction."""

    def __init__(
        self,
        descriptors: Iterable[HandlerDescriptor],
        policy: VersionPolicy | None = None,
    ):
        self.policy = policy or VersionPolicy()
        grouped: dict[tuple[HttpMethod, str], list[HandlerDescriptor]] = {}
        names: set[str] = set()
        for descriptor in descriptors:
            if descriptor.name in names:
                raise ValueError(f"Duplicate handler name: {descriptor.name}")
            names.add(descriptor.name)
            key = (descriptor.method, normalize_template(descriptor.template))
            grouped.setdefault(key, []).append(descriptor)

        groups = []
        for (method, _), members in grouped.items():
            _check_no_overlap(members)
            template = members[0].template
            groups.append(RouteGroup(
                template=template,
                method=method,
                descriptors=tuple(members),
                pattern=compile_template(normalize_path(template)),
            ))
        self._groups: tuple[RouteGroup, ...] = tuple(groups)
        self._by_name = {
            d.name: d for group in self._groups for d in group.descriptors
        }

    @property
    def groups(self) -> tuple[RouteGroup, ...]:
        return self._groups

    def descriptor(self, name: str) -> HandlerDescriptor:
        return self._by_name[name]

    def templates(self) -> list[tuple[str, list[HttpMethod]]]:
        """Distinct templates with the methods registered on each, in registration order."""
        result: dict[str, list[HttpMethod]] = {}
        for group in self._groups:
            result.setdefault(group.template, []).append(group.method)
        return list(result.items())

    def find_group(self, method: str, path: str) -> tuple[RouteGroup, dict[str, str]]:
        wanted = HttpMethod(method.upper()) if method.upper() in HttpMethod.__members__ else None
        for group in self._groups:
            if group.method is not wanted:
                continue
            params = group.match(path)
            if params is not None:
                return group, params
        raise RouteNotFoundError(method, path, ErrorContext(method=method, path=path))

    def select(
        self,
        method: str,
        path: str,
        accept: str | None,
        content_type: str | None,
        version_token: str | None,
    ) -> Selection:
        """Pick one handler for the request or raise the matching selection error."""
        group, params = self.find_group(method, path)
        context = ErrorContext(method=method, path=path)
        if version_token is None:
            version_token = params.get(self.policy.path_param)

        try:
            requested = self.policy.requested_version(version_token)
            context.api_version = str(requested)
            candidates = resolve_version(
                requested, group.descriptors, self.policy.exact_match,
            )
        except (MalformedInputError, NoMatchingVersionError) as exc:
            exc.context = context
            raise

        content_scores: dict[str, int] = {}
        if group.method.has_body:
            body_type = _concrete_content_type(content_type)
            for descriptor in candidates:
                found = best_match(body_type, descriptor.consumes)
                if found is not None:
                    content_scores[descriptor.name] = found[0]
            candidates = tuple(d for d in candidates if d.name in content_scores)
            if not candidates:
                raise UnsupportedMediaTypeError(content_type, context)

        accept_header = accept if accept and accept.strip() else ANY_MEDIA_TYPE
        ranked = []
        for descriptor in candidates:
            found = best_match(accept_header, descriptor.produces)
            if found is None:
                continue
            rank = (content_scores.get(descriptor.name, 0), found[0], _generality(descriptor))
            ranked.append((rank, descriptor, found[1]))
        if not ranked:
            raise NotAcceptableError(accept, context)

        ranked.sort(key=lambda item: item[0], reverse=True)
        if len(ranked) > 1 and ranked[0][0] == ranked[1][0]:
            tied = sorted(item[1].name for item in ranked if item[0] == ranked[0][0])
            raise AmbiguousActionError(
                f"{method} {path} is ambiguous between {', '.join(tied)}", tied,
            )

        _, chosen, media_type = ranked[0]
        logger.debug(
            f"Selected {chosen.name} for {method} {path}",
            extra={
                "handler": chosen.name,
                "api_version": str(requested),
                "media_type": media_type.essence,
            },
        )
        return Selection(
            descriptor=chosen,
            path_params=params,
            api_version=requested,
            response_media_type=media_type,
            supported_versions=group.supported_versions,
        )

    def path_for(self, name: str, **params: object) -> str:
        """Expand a handler's route template, e.g. for a Location header."""
        template = self.descriptor(name).template

        def _substitute(found: re.Match) -> str:
            return str(params[found.group(1)])

        return _PARAM_RE.sub(_substitute, template)


def _concrete_content_type(content_type: str | None) -> str | None:
    """A body has exactly one concrete media type; lists and wildcards match nothing."""
    parsed = parse_header(content_type)
    if len(parsed) != 1 or parsed[0].is_wildcard:
        return None
    return parsed[0].essence


def _check_no_overlap(members: list[HandlerDescriptor]) -> None:
    for index, left in enumerate(members):
        for right in members[index + 1:]:
            if _overlaps(left, right):
                raise AmbiguousActionError(
                    f"Handlers {left.name} and {right.name} on {left.method.value} "
                    f"{left.template} accept overlapping versions and media types",
                    sorted([left.name, right.name]),
                )
