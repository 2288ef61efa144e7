from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...config import Settings, get_settings
from ...exceptions import MailDeliveryError
from ...services.mail_relay import MailRelay, VolunteerMessage, relay_volunteer_message
from ..dependencies import get_mail_relay, read_json_body
from ..schemas import MessageResponse, VolunteerMessageRequest

logger = structlog.get_logger(__name__)

router = APIRouter()


def parse_volunteer_message(payload) -> Optional[VolunteerMessage]:
    try:
        form = VolunteerMessageRequest.model_validate(payload)
    except ValidationError:
        return None
    if not form.name or not form.email or not form.message:
        return None
    return VolunteerMessage(name=form.name, email=form.email, message=form.message)


@router.post(
    "/send-message",
    response_model=MessageResponse,
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": VolunteerMessageRequest.model_json_schema()}}}},
)
async def send_message(
    request: Request,
    relay: MailRelay = Depends(get_mail_relay),
    settings: Settings = Depends(get_settings),
):
    volunteer = parse_volunteer_message(await read_json_body(request))
    if volunteer is None:
        raise HTTPException(status_code=400, detail="All fields are required.")

    try:
        await relay_volunteer_message(relay, settings.email_user, volunteer)
    except MailDeliveryError as e:
        logger.error("volunteer_message_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to send message.")

    return MessageResponse(message="Message sent successfully!")
