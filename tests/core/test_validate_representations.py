"""Representation validation tests — semantic rules over input shapes.

Tests cover:
    - Author names required, non-blank, string, at most 150 characters
    - Unknown author fields are reported
    - Book title required, description bounded, page count a non-negative integer
"""

from library_api.core.validate_representations import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    validate_author_for_update,
    validate_book_for_creation,
)


def test_valid_author_has_no_errors():
    assert validate_author_for_update({"firstName": "Jon", "lastName": "Snow"}) == {}


def test_missing_and_blank_names_are_required():
    errors = validate_author_for_update({"firstName": "   "})
    assert errors == {
        "firstName": ["The firstName field is required."],
        "lastName": ["The lastName field is required."],
    }


def test_name_length_limit():
    errors = validate_author_for_update({"firstName": "x" * (NAME_MAX_LENGTH + 1), "lastName": "ok"})
    assert list(errors) == ["firstName"]
    assert validate_author_for_update({"firstName": "x" * NAME_MAX_LENGTH, "lastName": "ok"}) == {}


def test_non_string_name_is_reported_not_raised():
    errors = validate_author_for_update({"firstName": 42, "lastName": "ok"})
    assert errors == {"firstName": ["The firstName field must be a string."]}


def test_unknown_author_field_is_reported():
    errors = validate_author_for_update({"firstName": "a", "lastName": "b", "age": 3})
    assert "age" in errors


def test_non_object_author_is_reported():
    assert validate_author_for_update(["a"]) == {"": ["An author must be a JSON object."]}


def test_book_title_required():
    assert "title" in validate_book_for_creation({"description": "text"})


def test_book_description_optional_but_bounded():
    assert validate_book_for_creation({"title": "T"}) == {}
    errors = validate_book_for_creation({"title": "T", "description": "x" * (DESCRIPTION_MAX_LENGTH + 1)})
    assert list(errors) == ["description"]


def test_page_count_checked_only_for_page_count_shape():
    representation = {"title": "T", "amountOfPages": -1}
    assert validate_book_for_creation(representation) == {}
    assert validate_book_for_creation(representation, with_amount_of_pages=True) == {
        "amountOfPages": ["The amountOfPages field cannot be negative."],
    }


def test_boolean_page_count_is_not_an_integer():
    errors = validate_book_for_creation({"title": "T", "amountOfPages": True}, with_amount_of_pages=True)
    assert errors == {"amountOfPages": ["The amountOfPages field must be an integer."]}
