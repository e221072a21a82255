from __future__ import annotations

import random

import pytest

from identity import IDENTITY_POOL, IdentityRotator


def test_pool_has_ten_distinct_identities() -> None:
    assert len(IDENTITY_POOL) == 10
    assert len(set(IDENTITY_POOL)) == 10


def test_random_identity_can_pick_every_entry() -> None:
    rotator = IdentityRotator(rng=random.Random(1234))

    seen = {rotator.random_identity() for _ in range(500)}

    assert seen == set(IDENTITY_POOL)


def test_rotate_keeps_current_in_pool() -> None:
    rotator = IdentityRotator(rng=random.Random(7))

    assert rotator.current in IDENTITY_POOL
    for _ in range(20):
        assert rotator.rotate() == rotator.current
        assert rotator.current in IDENTITY_POOL


def test_set_identity() -> None:
    rotator = IdentityRotator()

    assert rotator.set_identity("CustomBot/2.0") is True
    assert rotator.current == "CustomBot/2.0"

    assert rotator.set_identity("") is False
    assert rotator.current == "CustomBot/2.0"


def test_toggle_rotation() -> None:
    rotator = IdentityRotator(enabled=False)
    assert not rotator.enabled

    rotator.enable()
    assert rotator.enabled
    rotator.disable()
    assert not rotator.enabled


def test_empty_pool_is_rejected() -> None:
    with pytest.raises(ValueError):
        IdentityRotator(pool=())
