"""Author routes — versioned listing, fetch, full replacement and JSON Patch.

Tests cover:
    - v1.0 and v2.0 collections, api-supported-versions header
    - Unsupported and unparseable versions are 400 before any handler runs
    - Unknown authors are 404, bad ids are 400
    - PUT replaces, validates and bumps the ETag
    - PATCH checks existence before the body, halts on a failing operation,
      reports validation failures, and never persists on failure
    - If-Match mismatches are 412
"""

import json
from uuid import uuid4

from library_api.core.domain_types import JSON, JSON_PATCH


def _author_url(author, version="1.0"):
    return f"/api/v{version}/authors/{author.id}"


# --- collection -------------------------------------------------------------

async def test_list_authors_v1(client, seed_author):
    res = await client.get("/api/v1.0/authors")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith(JSON)
    assert res.headers["api-supported-versions"] == "1.0, 2.0"
    assert res.json() == [
        {"id": str(seed_author.id), "firstName": "George", "lastName": "RR Martin"},
    ]


async def test_list_authors_v2(client, seed_author):
    res = await client.get("/api/v2.0/authors")
    assert res.status_code == 200
    assert res.json()[0]["id"] == str(seed_author.id)


async def test_unsupported_version_is_400(client):
    res = await client.get("/api/v0.5/authors")
    assert res.status_code == 400
    body = res.json()["error"]
    assert body["code"] == "UNSUPPORTED_API_VERSION"
    assert body["details"]["supported"] == ["1.0", "2.0"]


async def test_unparseable_version_is_400(client):
    res = await client.get("/api/vnext/authors")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_INPUT"


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/publishers")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "ROUTE_NOT_FOUND"


async def test_not_acceptable(client, seed_author):
    res = await client.get("/api/v1.0/authors", headers={"Accept": "application/xml"})
    assert res.status_code == 406
    assert res.json()["error"]["code"] == "NOT_ACCEPTABLE"


# --- single author ----------------------------------------------------------

async def test_get_author_with_etag(client, seed_author):
    res = await client.get(_author_url(seed_author))
    assert res.status_code == 200
    assert res.headers["etag"] == '"1"'
    assert res.json()["firstName"] == "George"


async def test_get_missing_author_is_404(client):
    res = await client.get(f"/api/v1.0/authors/{uuid4()}")
    assert res.status_code == 404
    body = res.json()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["context"]["handler"] == "get_author"
    assert body["context"]["api_version"] == "1.0"


async def test_bad_author_id_is_400(client):
    res = await client.get("/api/v1.0/authors/not-a-uuid")
    assert res.status_code == 400
    assert "authorId" in res.json()["error"]["details"]


# --- PUT --------------------------------------------------------------------

async def test_put_replaces_author(client, seed_author, load_author):
    res = await client.put(
        _author_url(seed_author, "2.0"),
        json={"firstName": "Jon", "lastName": "Snow"},
    )
    assert res.status_code == 200
    assert res.json() == {"id": str(seed_author.id), "firstName": "Jon", "lastName": "Snow"}
    assert res.headers["etag"] == '"2"'
    stored = await load_author(seed_author.id)
    assert (stored.first_name, stored.last_name) == ("Jon", "Snow")


async def test_put_semantic_failure_is_422(client, seed_author, load_author):
    res = await client.put(
        _author_url(seed_author), json={"firstName": "", "lastName": "x" * 151},
    )
    assert res.status_code == 422
    details = res.json()["error"]["details"]
    assert set(details) == {"firstName", "lastName"}
    assert (await load_author(seed_author.id)).first_name == "George"


async def test_put_structural_failure_is_400(client, seed_author):
    res = await client.put(_author_url(seed_author), json={"firstName": 5, "lastName": "x"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_INPUT"


async def test_put_invalid_json_is_400(client, seed_author):
    res = await client.put(
        _author_url(seed_author), content=b"{not json", headers={"Content-Type": JSON},
    )
    assert res.status_code == 400


async def test_put_without_content_type_is_415(client, seed_author):
    res = await client.put(_author_url(seed_author), content=b"{}")
    assert res.status_code == 415


async def test_put_missing_author_is_404(client):
    res = await client.put(
        f"/api/v1.0/authors/{uuid4()}", json={"firstName": "a", "lastName": "b"},
    )
    assert res.status_code == 404


async def test_put_with_stale_if_match_is_412(client, seed_author, load_author):
    res = await client.put(
        _author_url(seed_author),
        json={"firstName": "Jon", "lastName": "Snow"},
        headers={"If-Match": '"7"'},
    )
    assert res.status_code == 412
    assert res.json()["error"]["details"]["current_etag"] == '"1"'
    assert (await load_author(seed_author.id)).first_name == "George"


async def test_put_with_current_if_match_succeeds(client, seed_author):
    res = await client.put(
        _author_url(seed_author),
        json={"firstName": "Jon", "lastName": "Snow"},
        headers={"If-Match": '"1"'},
    )
    assert res.status_code == 200


# --- PATCH ------------------------------------------------------------------

def _patch(client, url, operations, **kwargs):
    headers = {"Content-Type": JSON_PATCH, **kwargs.pop("headers", {})}
    return client.patch(url, content=json.dumps(operations), headers=headers, **kwargs)


async def test_patch_replaces_field(client, seed_author, load_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "replace", "path": "/firstName", "value": "Jon"},
    ])
    assert res.status_code == 200
    assert res.json()["firstName"] == "Jon"
    assert res.json()["lastName"] == "RR Martin"
    assert res.headers["etag"] == '"2"'
    assert (await load_author(seed_author.id)).first_name == "Jon"


async def test_patch_paths_are_case_insensitive(client, seed_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "replace", "path": "/lastname", "value": "Martin"},
    ])
    assert res.status_code == 200
    assert res.json()["lastName"] == "Martin"


async def test_patch_accepts_plain_json_content_type(client, seed_author):
    res = await client.patch(
        _author_url(seed_author),
        json=[{"op": "test", "path": "/firstName", "value": "George"}],
    )
    assert res.status_code == 200


async def test_patch_missing_author_is_404_before_body_is_read(client):
    res = await client.patch(
        f"/api/v1.0/authors/{uuid4()}",
        content=b"this is not a patch document",
        headers={"Content-Type": JSON_PATCH},
    )
    assert res.status_code == 404


async def test_patch_halts_on_failing_operation(client, seed_author, load_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "replace", "path": "/firstName", "value": "Jon"},
        {"op": "remove", "path": "/nonexistent"},
    ])
    assert res.status_code == 422
    body = res.json()["error"]
    assert body["code"] == "PATCH_APPLICATION_FAILED"
    assert body["details"]["operation_index"] == 1
    assert body["details"]["reason"] == "PathNotFound"
    assert (await load_author(seed_author.id)).first_name == "George"


async def test_patch_with_non_ascii_array_index_is_422(client, seed_author, load_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "add", "path": "/tags", "value": [1]},
        {"op": "replace", "path": "/tags/²", "value": 2},
    ])
    assert res.status_code == 422
    body = res.json()["error"]
    assert body["code"] == "PATCH_APPLICATION_FAILED"
    assert body["details"]["operation_index"] == 1
    assert body["details"]["reason"] == "InvalidIndex"
    assert (await load_author(seed_author.id)).first_name == "George"


async def test_patch_validation_failure_is_422(client, seed_author, load_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "replace", "path": "/lastName", "value": ""},
    ])
    assert res.status_code == 422
    body = res.json()["error"]
    assert body["code"] == "VALIDATION_FAILED"
    assert "lastName" in body["details"]
    assert (await load_author(seed_author.id)).last_name == "RR Martin"


async def test_patch_wrong_type_after_apply_is_422_not_400(client, seed_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "replace", "path": "/firstName", "value": 42},
    ])
    assert res.status_code == 422


async def test_patch_adding_unknown_field_is_422(client, seed_author):
    res = await _patch(client, _author_url(seed_author), [
        {"op": "add", "path": "/middleName", "value": "R"},
    ])
    assert res.status_code == 422
    assert "middleName" in res.json()["error"]["details"]


async def test_patch_structurally_invalid_document_is_400(client, seed_author):
    res = await _patch(client, _author_url(seed_author), {"op": "replace"})
    assert res.status_code == 400


async def test_patch_with_stale_if_match_is_412(client, seed_author):
    res = await _patch(
        client, _author_url(seed_author),
        [{"op": "replace", "path": "/firstName", "value": "Jon"}],
        headers={"If-Match": '"2"'},
    )
    assert res.status_code == 412
