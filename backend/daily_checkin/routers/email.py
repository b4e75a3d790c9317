"""Test email route — lets a logged-in user verify SMTP delivery."""
from fastapi import APIRouter, Depends, HTTPException, status

from daily_checkin.dependencies import get_current_user, get_email_sender
from daily_checkin.models.user import User
from daily_checkin.schemas.reminder import SendTestEmailRequest
from daily_checkin.schemas.user import MessageResponse
from daily_checkin.services.email_service import EmailSender, smtp_check_message

router = APIRouter()


@router.post("/test", response_model=MessageResponse)
def send_test_email(
    payload: SendTestEmailRequest,
    user: User = Depends(get_current_user),
    sender: EmailSender = Depends(get_email_sender),
):
    subject, text, html = smtp_check_message()
    if not sender.send(payload.email, subject, text, html):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send email, check the SMTP configuration or try again later",
        )
    return {"success": True, "message": f"Test email sent to {payload.email}"}
