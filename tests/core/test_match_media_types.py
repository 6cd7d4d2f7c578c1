"""Media type matching tests — parsing, compatibility and best-match scoring.

Tests cover:
    - Parameters and case are ignored when comparing
    - Malformed header entries are dropped, malformed declarations raise
    - Wildcards on either side are compatible
    - best_match scores the more general side of the pair
"""

import pytest

from library_api.core.domain_types import BOOK, JSON
from library_api.core.match_media_types import (
    SPECIFICITY_ANY,
    SPECIFICITY_GENERIC,
    SPECIFICITY_TYPE_WILDCARD,
    SPECIFICITY_VENDOR,
    MediaType,
    best_match,
    is_compatible,
    matches,
    parse_declared,
    parse_header,
    parse_media_type,
)


def test_parse_strips_parameters_and_lowercases():
    parsed = parse_media_type("Application/JSON; charset=utf-8; q=0.5")
    assert parsed.essence == "application/json"
    assert ("charset", "utf-8") in parsed.params


@pytest.mark.parametrize("value", ["", "json", "a/b/c", "/json", "*/json"])
def test_parse_rejects_malformed(value):
    assert parse_media_type(value) is None


def test_parse_header_drops_malformed_entries():
    parsed = parse_header("garbage, application/json, text/*")
    assert [m.essence for m in parsed] == ["application/json", "text/*"]


def test_parse_header_missing_is_empty():
    assert parse_header(None) == []


def test_parse_declared_raises_on_bad_value():
    with pytest.raises(ValueError):
        parse_declared(["application/json", "nonsense"])


def test_specificity_scale():
    assert parse_media_type("*/*").specificity == SPECIFICITY_ANY
    assert parse_media_type("application/*").specificity == SPECIFICITY_TYPE_WILDCARD
    assert parse_media_type(JSON).specificity == SPECIFICITY_GENERIC
    assert parse_media_type(BOOK).specificity == SPECIFICITY_VENDOR
    assert parse_media_type("application/json-patch+json").specificity == SPECIFICITY_VENDOR


def test_wildcards_are_compatible_both_ways():
    json = MediaType("application", "json")
    assert is_compatible(MediaType("*", "*"), json)
    assert is_compatible(json, MediaType("*", "*"))
    assert is_compatible(MediaType("application", "*"), json)
    assert not is_compatible(MediaType("text", "*"), json)


def test_vendor_type_does_not_match_plain_json():
    assert not matches(BOOK, [JSON])


def test_matches_when_only_a_later_candidate_is_declared():
    assert matches(
        "application/json, application/vendor.x+json", ["application/vendor.x+json"],
    )


def test_unrelated_type_does_not_match():
    assert not matches("application/xml", ["application/json"])


def test_any_wildcard_matches_vendor_only_declarations():
    assert matches("*/*", [BOOK])


@pytest.mark.parametrize("value", ["garbage", ";;,/", "", None])
def test_malformed_header_never_matches(value):
    assert not matches(value, [JSON])


def test_best_match_prefers_exact_vendor_over_wildcard():
    declared = parse_declared([JSON, BOOK])
    score, negotiated = best_match(f"*/*, {BOOK}", declared)
    assert score == SPECIFICITY_VENDOR
    assert negotiated.essence == BOOK


def test_best_match_wildcard_returns_declared_type():
    score, negotiated = best_match("*/*", parse_declared([JSON]))
    assert score == SPECIFICITY_ANY
    assert negotiated.essence == JSON


def test_best_match_none_when_incompatible():
    assert best_match("text/html", parse_declared([JSON])) is None
