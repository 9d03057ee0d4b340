"""
Credential Store Tests
Encrypted credentials are only written and listed for team members
"""

import uuid

import pytest
from fastapi import HTTPException

from app.models import Credential, SecretKind, TeamMember
from app.utils.credentials import add_credential, list_credentials
from app.utils.permissions import TeamAccessDenied


def personal_team_id(db_session, user):
    return db_session.query(TeamMember.team_id).filter_by(user_id=user.id).scalar()


def test_member_stores_and_lists_credentials(db_session, make_user):
    alice = make_user("alice@example.com", "Alice")
    team_id = personal_team_id(db_session, alice)

    add_credential(
        db_session, team_id, alice.id,
        title="Prod DB", hostname="db.internal", username="postgres",
        kind=SecretKind.PASSWORD, encrypted_secret=b"ciphertext-1", nonce=b"nonce-1",
    )
    add_credential(
        db_session, team_id, alice.id,
        title="Bastion", hostname="bastion.internal", username="deploy",
        kind=SecretKind.SSH_KEY, encrypted_secret=b"ciphertext-2", nonce=b"nonce-2",
        public_key="ssh-ed25519 AAAAC3Nza deploy@bastion",
    )

    credentials = list_credentials(db_session, team_id, alice.id)
    assert sorted(c.title for c in credentials) == ["Bastion", "Prod DB"]

    bastion = next(c for c in credentials if c.title == "Bastion")
    assert bastion.kind == SecretKind.SSH_KEY
    assert bastion.encrypted_secret == b"ciphertext-2"
    assert bastion.public_key.startswith("ssh-ed25519")


def test_outsider_cannot_list_credentials(db_session, make_user):
    alice = make_user("alice@example.com", "Alice")
    mallory = make_user("mallory@example.com", "Mallory")
    team_id = personal_team_id(db_session, alice)
    add_credential(
        db_session, team_id, alice.id,
        title="Prod DB", hostname="db.internal", username="postgres",
        kind=SecretKind.PASSWORD, encrypted_secret=b"c", nonce=b"n",
    )

    with pytest.raises(TeamAccessDenied) as exc_info:
        list_credentials(db_session, team_id, mallory.id)

    assert exc_info.value.status_code == 403


def test_outsider_cannot_add_credentials(db_session, make_user):
    alice = make_user("alice@example.com", "Alice")
    mallory = make_user("mallory@example.com", "Mallory")
    team_id = personal_team_id(db_session, alice)

    with pytest.raises(TeamAccessDenied):
        add_credential(
            db_session, team_id, mallory.id,
            title="Planted", hostname="evil", username="x",
            kind=SecretKind.PASSWORD, encrypted_secret=b"c", nonce=b"n",
        )

    assert db_session.query(Credential).count() == 0


def test_unknown_team_is_not_found(db_session, make_user):
    alice = make_user("alice@example.com", "Alice")

    with pytest.raises(HTTPException) as exc_info:
        list_credentials(db_session, uuid.uuid4(), alice.id)

    assert exc_info.value.status_code == 404


def test_public_key_only_for_ssh_credentials(db_session, make_user):
    alice = make_user("alice@example.com", "Alice")

    with pytest.raises(HTTPException) as exc_info:
        add_credential(
            db_session, personal_team_id(db_session, alice), alice.id,
            title="Mail", hostname="mail.example.com", username="alice",
            kind=SecretKind.PASSWORD, encrypted_secret=b"c", nonce=b"n",
            public_key="ssh-ed25519 AAAA",
        )

    assert exc_info.value.status_code == 400
    assert db_session.query(Credential).count() == 0
