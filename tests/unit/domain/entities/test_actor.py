"""Unit tests for the Actor entity."""

import pytest

from collectionhub.domain.entities import ALL_SCOPES, Actor, Scope, UserRole


def test_actor_defaults_to_developer_with_all_scopes():
    actor = Actor(user_id="user-1")

    assert actor.role is UserRole.DEVELOPER
    assert actor.scopes == ALL_SCOPES
    assert not actor.is_mod


@pytest.mark.parametrize(
    "role,is_mod",
    [(UserRole.DEVELOPER, False), (UserRole.MODERATOR, True), (UserRole.ADMIN, True)],
)
def test_is_mod(role, is_mod):
    assert Actor(user_id="u", role=role).is_mod is is_mod


def test_has_scope():
    actor = Actor(user_id="u", scopes=frozenset({Scope.COLLECTION_READ}))

    assert actor.has_scope(Scope.COLLECTION_READ)
    assert not actor.has_scope(Scope.COLLECTION_WRITE)
