from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.firebase import TokenVerifier
from ..exceptions import InvalidTokenError
from ..repositories.article_repository import ArticleRepository
from ..services.mail_relay import MailRelay
from ..services.news_sync_service import NewsSyncService

security = HTTPBearer(auto_error=False)


def get_article_repository(db: Session = Depends(get_db)) -> ArticleRepository:
    return ArticleRepository(db)


# Process-wide collaborators are built in the app lifespan and stored on app.state
def get_sync_service(request: Request) -> NewsSyncService:
    return request.app.state.sync_service


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_mail_relay(request: Request) -> MailRelay:
    return request.app.state.mail_relay


async def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Dict[str, Any]:
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        return await verifier.verify(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, or None when the body is empty or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None
