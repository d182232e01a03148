import mongomock
import pytest
from fastapi.testclient import TestClient

from useraccounts.config import Settings
from useraccounts.server import create_app
from useraccounts.services.credential_store import CredentialStore
from useraccounts.utils.auth import PasswordHasher
from useraccounts.utils.db_setup import setup_db_indexes

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class RecordingNotifier:
    """Collects OTPs instead of delivering them."""

    def __init__(self):
        self.emails = []
        self.sms = []

    def send_email_otp(self, to_email, otp):
        self.emails.append((to_email, otp))
        return True

    def send_mobile_otp(self, mobile_number, otp):
        self.sms.append((mobile_number, otp))
        return True


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        jwt_secret="test-secret",
        otp_expiry_minutes=5,
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        environment="test",
    )


@pytest.fixture()
def users():
    collection = mongomock.MongoClient()["user_accounts"]["users"]
    setup_db_indexes(collection)
    return collection


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture()
def store(users, hasher):
    return CredentialStore(users, hasher)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def client(settings, users, notifier):
    app = create_app(settings, users=users, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client):
    """Post a multipart registration, overriding any default field."""

    def _register(with_file=True, **overrides):
        data = {
            "email": "a@x.com",
            "mobile_number": "555",
            "password": "secret1",
            "username": "a",
        }
        data.update(overrides)
        data = {key: value for key, value in data.items() if value is not None}
        files = {"file": ("avatar.png", PNG_BYTES, "image/png")} if with_file else None
        return client.post("/api/login/register", data=data, files=files)

    return _register
