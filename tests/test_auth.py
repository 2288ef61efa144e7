from unittest.mock import MagicMock, patch

import pytest

from news_backend.config import Settings
from news_backend.core.firebase import FirebaseTokenVerifier, initialize_firebase
from news_backend.exceptions import InvalidTokenError


@pytest.fixture
def verifier():
    with patch("news_backend.core.firebase.initialize_firebase", return_value=MagicMock()):
        yield FirebaseTokenVerifier(Settings())


@pytest.mark.asyncio
async def test_verify_returns_decoded_token(verifier):
    decoded = {"uid": "abc123", "email": "editor@example.org"}
    with patch("news_backend.core.firebase.auth.verify_id_token", return_value=decoded) as mock_verify:
        identity = await verifier.verify("id-token")

    assert identity == decoded
    assert mock_verify.call_args.args[0] == "id-token"


@pytest.mark.asyncio
async def test_verify_raises_invalid_token(verifier):
    with patch("news_backend.core.firebase.auth.verify_id_token", side_effect=ValueError("bad token")):
        with pytest.raises(InvalidTokenError):
            await verifier.verify("garbage")


@pytest.mark.asyncio
async def test_verify_fails_when_firebase_unavailable():
    verifier = FirebaseTokenVerifier(Settings(firebase_service_account_path="/nonexistent/firebase.json"))

    with patch("news_backend.core.firebase.firebase_admin.get_app", side_effect=ValueError("no app")):
        with pytest.raises(InvalidTokenError):
            await verifier.verify("id-token")


def test_initialize_firebase_reuses_existing_app():
    existing = MagicMock()
    with patch("news_backend.core.firebase.firebase_admin.get_app", return_value=existing):
        assert initialize_firebase(Settings()) is existing


def test_initialize_firebase_requires_service_account_file(tmp_path):
    settings = Settings(firebase_service_account_path=str(tmp_path / "missing.json"))
    with patch("news_backend.core.firebase.firebase_admin.get_app", side_effect=ValueError("no app")):
        with pytest.raises(FileNotFoundError):
            initialize_firebase(settings)
