import asyncio
import os
from typing import Any, Dict, Optional, Protocol

import firebase_admin
import structlog
from firebase_admin import auth, credentials

from ..config import Settings, get_settings
from ..exceptions import InvalidTokenError

logger = structlog.get_logger(__name__)


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Dict[str, Any]:
        """Return the decoded identity or raise InvalidTokenError."""
        ...


def initialize_firebase(settings: Optional[Settings] = None) -> firebase_admin.App:
    settings = settings or get_settings()
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if not os.path.exists(settings.firebase_service_account_path):
        raise FileNotFoundError(
            f"Firebase service account file not found: {settings.firebase_service_account_path}"
        )

    cred = credentials.Certificate(settings.firebase_service_account_path)
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("firebase_initialized", project_id=settings.firebase_project_id)
    return app


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens with the Admin SDK."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            self._app = initialize_firebase(self.settings)
        return self._app

    async def verify(self, token: str) -> Dict[str, Any]:
        try:
            app = self._get_app()
            # verify_id_token may fetch Google's public keys over the network
            return await asyncio.to_thread(auth.verify_id_token, token, app)
        except Exception as e:
            logger.warning("token_verification_failed", error=str(e))
            raise InvalidTokenError("Invalid token") from e
