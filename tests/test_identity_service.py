"""Tests for device identity."""

import pytest

from nutritrack.services.identity import IdentityService
from nutritrack.services.mirror import USER_ID_KEY
from tests.conftest import InMemoryMirror


def test_get_user_id_generates_once() -> None:
    mirror = InMemoryMirror()
    generated = iter(["first", "second"])
    service = IdentityService(mirror, generate_id=lambda: next(generated))

    assert service.get_user_id() == "first"
    assert service.get_user_id() == "first"
    assert mirror.get(USER_ID_KEY) == "first"


def test_default_ids_are_random() -> None:
    first = IdentityService(InMemoryMirror()).get_user_id()
    second = IdentityService(InMemoryMirror()).get_user_id()

    assert first != second
    assert len(first) == 32


def test_set_user_id_rejects_blank() -> None:
    service = IdentityService(InMemoryMirror())

    with pytest.raises(ValueError):
        service.set_user_id("   ")
