# tests/test_credential_store.py
# Credential store behaviour against an in-memory MongoDB

import pytest

from useraccounts.exceptions import DuplicateEmailError, DuplicateMobileError
from useraccounts.models.user import RegistrationForm, new_user_document


def make_document(email="a@x.com", mobile_number="555", password="secret1"):
    form = RegistrationForm(email=email, mobile_number=mobile_number, password=password, username="a")
    return new_user_document(form, "data:image/png;base64,AAAA")


def test_create_hashes_password(store, hasher):
    """Only the hash is persisted and it verifies against the plaintext."""
    user = store.create(make_document())
    stored = store.find_by_email("a@x.com")
    assert stored["_id"] == user["_id"]
    assert stored["password"] != "secret1"
    assert hasher.verify("secret1", stored["password"])


def test_new_user_defaults(store):
    """New documents start on the free plan with empty OTP state."""
    store.create(make_document())
    stored = store.find_by_email("a@x.com")
    assert stored["subscription_plan"] == "Free"
    assert stored["newsletter"] is False
    assert stored["login_attempts"] == 0
    assert stored["email_otp"] is None
    assert stored["mobile_otp"] is None
    assert stored["last_login_at"] is None


def test_email_is_case_insensitive(store):
    """Emails are stored lower-cased and matched regardless of case."""
    store.create(make_document(email="  Mixed@Example.COM "))
    assert store.find_by_email("mixed@example.com")["email"] == "mixed@example.com"
    assert store.find_by_email("MIXED@example.com") is not None


def test_duplicate_email_rejected(store, users):
    """A second account with the same email is refused."""
    store.create(make_document())
    with pytest.raises(DuplicateEmailError):
        store.create(make_document(email="A@X.com", mobile_number="777"))
    assert users.count_documents({}) == 1


def test_duplicate_mobile_rejected(store, users):
    """A second account with the same mobile number is refused."""
    store.create(make_document())
    with pytest.raises(DuplicateMobileError):
        store.create(make_document(email="b@x.com"))
    assert users.count_documents({}) == 1


def test_update_without_password_keeps_hash(store):
    """Writes that do not touch the password never re-hash it."""
    user = store.create(make_document())
    updated = store.update(user["_id"], {"email_otp": "123456"})
    assert updated["password"] == user["password"]
    assert updated["email_otp"] == "123456"


def test_update_with_password_rehashes(store, hasher):
    """Writing a new password stores a fresh hash of it."""
    user = store.create(make_document())
    updated = store.update(user["_id"], {"password": "newsecret"})
    assert updated["password"] != user["password"]
    assert hasher.verify("newsecret", updated["password"])
    assert not hasher.verify("secret1", updated["password"])


def test_every_write_stamps_updated_at(store):
    """prepare_for_save always refreshes updated_at."""
    prepared = store.prepare_for_save({"email_otp": None})
    assert "updated_at" in prepared
    assert "password" not in prepared


def test_record_login_increments_counter(store):
    """Logins bump the counter and set last_login_at."""
    user = store.create(make_document())
    store.record_login(user["_id"])
    updated = store.record_login(user["_id"], {"email_otp": None})
    assert updated["login_attempts"] == 2
    assert updated["last_login_at"] is not None


def test_record_login_skipped_when_guard_fails(store, users):
    """A guard that no longer matches leaves the document untouched."""
    user = store.create(make_document())
    assert store.record_login(user["_id"], {"email_otp": None}, guard={"email_otp": "000000"}) is None
    stored = users.find_one({"_id": user["_id"]})
    assert stored["login_attempts"] == 0
    assert stored["last_login_at"] is None


def test_find_by_email_and_mobile(store):
    """Token lookups need both identifiers to match."""
    store.create(make_document())
    assert store.find_by_email_and_mobile("a@x.com", "555") is not None
    assert store.find_by_email_and_mobile("a@x.com", "999") is None
