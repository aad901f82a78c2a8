"""Tests for record id generation."""

import re

import pytest

from core.identifiers import DEFAULT_ID_LENGTH, generate_id

_URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


def test_default_length() -> None:
    assert DEFAULT_ID_LENGTH == 12
    assert len(generate_id()) == 12


@pytest.mark.parametrize("length", [1, 2, 3, 5, 8, 11, 12, 13, 22, 32])
def test_requested_length(length) -> None:
    text_id = generate_id(length)
    assert len(text_id) == length
    assert _URL_SAFE.match(text_id)


def test_no_separator_character() -> None:
    """Ids never contain '~', which splits id from password in share URLs."""
    assert all("~" not in generate_id() for _ in range(200))


def test_ids_are_distinct() -> None:
    assert len({generate_id() for _ in range(1000)}) == 1000


def test_invalid_length() -> None:
    with pytest.raises(ValueError):
        generate_id(0)
