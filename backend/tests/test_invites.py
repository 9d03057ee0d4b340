"""
Invite Ledger Tests
Issuance, single-use redemption and the issuance gate
"""

import threading
import uuid

import pytest

from app.config import settings
from app.models import InviteCode
from app.schemas import SignupRequest
from app.utils.accounts import RegistrationFailed, create_account
from app.utils.invites import InviteRejected, issue_invite, redeem_invite


def test_issue_invite_returns_uuid_code(client, db_session):
    response = client.post("/auth/invite")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")

    code = response.text
    assert str(uuid.UUID(code)) == code

    invite = db_session.query(InviteCode).filter_by(code=code).one()
    assert invite.is_used is False


def test_issued_codes_are_unique(db_session):
    codes = {issue_invite(db_session) for _ in range(20)}
    assert len(codes) == 20
    assert db_session.query(InviteCode).count() == 20


def test_redeem_marks_invite_used(db_session):
    code = issue_invite(db_session)

    redeem_invite(db_session, code)
    db_session.commit()

    assert db_session.query(InviteCode).filter_by(code=code).one().is_used is True


def test_redeem_unknown_code_is_rejected(db_session):
    with pytest.raises(InviteRejected) as exc_info:
        redeem_invite(db_session, "does-not-exist")

    assert exc_info.value.status_code == 403


def test_redeem_rolled_back_leaves_invite_unused(db_session):
    code = issue_invite(db_session)

    redeem_invite(db_session, code)
    db_session.rollback()

    assert db_session.query(InviteCode).filter_by(code=code).one().is_used is False


def test_second_session_cannot_redeem_spent_code(session_factory):
    """Two independent units of work: only the first redemption succeeds"""
    setup = session_factory()
    code = issue_invite(setup)
    setup.close()

    first = session_factory()
    second = session_factory()
    try:
        redeem_invite(first, code)
        first.commit()

        with pytest.raises(InviteRejected):
            redeem_invite(second, code)
        second.rollback()
    finally:
        first.close()
        second.close()


def test_concurrent_redemptions_have_one_winner(session_factory):
    """Row locks on PostgreSQL, the database write lock on SQLite: one UPDATE wins"""
    setup = session_factory()
    code = issue_invite(setup)
    setup.close()

    barrier = threading.Barrier(2)
    outcomes = []

    def attempt():
        session = session_factory()
        try:
            barrier.wait()
            redeem_invite(session, code)
            session.commit()
            outcomes.append("redeemed")
        except InviteRejected:
            session.rollback()
            outcomes.append("rejected")
        finally:
            session.close()

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["redeemed", "rejected"]

    check = session_factory()
    assert check.query(InviteCode).filter_by(code=code).one().is_used is True
    check.close()


def test_concurrent_signups_same_email_spend_one_invite(session_factory, signup_payload):
    """The unique email decides the race and the loser keeps its invite"""
    setup = session_factory()
    codes = [issue_invite(setup), issue_invite(setup)]
    setup.close()

    barrier = threading.Barrier(2)
    outcomes = {}

    def attempt(code):
        session = session_factory()
        try:
            barrier.wait()
            create_account(session, SignupRequest(**signup_payload(code, email="race@example.com")))
            outcomes[code] = "created"
        except RegistrationFailed:
            outcomes[code] = "failed"
        finally:
            session.close()

    threads = [threading.Thread(target=attempt, args=(code,)) for code in codes]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes.values()) == ["created", "failed"]

    check = session_factory()
    for code, outcome in outcomes.items():
        used = check.query(InviteCode).filter_by(code=code).one().is_used
        assert used is (outcome == "created")
    check.close()


def test_invite_gate_rejects_missing_token(client, monkeypatch):
    monkeypatch.setattr(settings, "INVITE_ISSUER_TOKEN", "issuer-secret")

    response = client.post("/auth/invite")
    assert response.status_code == 403


def test_invite_gate_rejects_wrong_token(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "INVITE_ISSUER_TOKEN", "issuer-secret")

    response = client.post("/auth/invite", headers={"X-Invite-Token": "guess"})
    assert response.status_code == 403
    assert db_session.query(InviteCode).count() == 0


def test_invite_gate_accepts_configured_token(client, monkeypatch):
    monkeypatch.setattr(settings, "INVITE_ISSUER_TOKEN", "issuer-secret")

    response = client.post("/auth/invite", headers={"X-Invite-Token": "issuer-secret"})
    assert response.status_code == 200
    assert uuid.UUID(response.text)
