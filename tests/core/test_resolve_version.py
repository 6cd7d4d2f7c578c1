"""Version resolution tests — parsing, token extraction and narrowing.

Tests cover:
    - '1', '1.0' and 'v2.0' parse; anything else is MalformedInput via the policy
    - Absent token falls back to the policy default
    - Non-exact policy picks the highest declared version <= requested
    - Exact policy only accepts declared versions
    - Any-version descriptors always survive narrowing
"""

from dataclasses import dataclass

import pytest

from library_api.core.domain_types import VersionSource
from library_api.core.errors import MalformedInputError, NoMatchingVersionError
from library_api.core.resolve_version import (
    ApiVersion,
    VersionPolicy,
    declared_versions,
    resolve_version,
)


@dataclass(frozen=True)
class _Handler:
    name: str
    versions: frozenset | None


V1 = ApiVersion(1, 0)
V2 = ApiVersion(2, 0)

LIST_V1 = _Handler("list_v1", frozenset({V1}))
LIST_V2 = _Handler("list_v2", frozenset({V2}))
ANY = _Handler("any", None)


@pytest.mark.parametrize("token,expected", [
    ("1", ApiVersion(1, 0)),
    ("1.0", ApiVersion(1, 0)),
    ("v2.0", ApiVersion(2, 0)),
    ("2.5", ApiVersion(2, 5)),
])
def test_parse_accepts_common_forms(token, expected):
    assert ApiVersion.parse(token) == expected


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        ApiVersion.parse("latest")


def test_version_renders_major_minor():
    assert str(ApiVersion(2)) == "2.0"


def test_missing_token_uses_default():
    assert VersionPolicy(default=V2).requested_version(None) == V2
    assert VersionPolicy(default=V2).requested_version("  ") == V2


def test_invalid_token_is_malformed_input():
    with pytest.raises(MalformedInputError) as exc_info:
        VersionPolicy().requested_version("abc")
    assert exc_info.value.http_status == 400


def test_extract_token_reads_active_source_only():
    headers = {"api-version": "2.0"}
    query = {"api-version": "3.0"}
    path = {"version": "1.0"}
    assert VersionPolicy(source=VersionSource.PATH).extract_token(path, headers, query) == "1.0"
    assert VersionPolicy(source=VersionSource.HEADER).extract_token(path, headers, query) == "2.0"
    assert VersionPolicy(source=VersionSource.QUERY).extract_token(path, headers, query) == "3.0"


def test_declared_versions_is_sorted_union():
    assert declared_versions([LIST_V2, ANY, LIST_V1]) == [V1, V2]


def test_exact_version_selects_its_handler():
    assert resolve_version(V2, [LIST_V1, LIST_V2]) == (LIST_V2,)


def test_higher_request_falls_back_to_highest_declared():
    assert resolve_version(ApiVersion(3, 0), [LIST_V1, LIST_V2]) == (LIST_V2,)
    assert resolve_version(ApiVersion(1, 5), [LIST_V1, LIST_V2]) == (LIST_V1,)


def test_request_below_every_declared_version_fails():
    with pytest.raises(NoMatchingVersionError) as exc_info:
        resolve_version(ApiVersion(0, 9), [LIST_V1, LIST_V2])
    assert exc_info.value.details["supported"] == ["1.0", "2.0"]


def test_exact_match_rejects_undeclared_version():
    with pytest.raises(NoMatchingVersionError):
        resolve_version(ApiVersion(3, 0), [LIST_V1, LIST_V2], exact_match=True)


def test_any_version_handler_always_survives():
    assert resolve_version(ApiVersion(7, 0), [ANY]) == (ANY,)
    assert resolve_version(ApiVersion(0, 1), [LIST_V1, ANY]) == (ANY,)
