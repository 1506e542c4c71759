import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from storefront.application.support_chat import ChatState, SupportChatWidget
from storefront.domain.models import IssueForm, User
from storefront.interfaces.dependencies import get_current_user, get_session_id

router = APIRouter(prefix="/support")
logger = logging.getLogger(__name__)


class ChatIn(BaseModel):
    text: str


def get_widget(request: Request, session_id: str = Depends(get_session_id)) -> SupportChatWidget:
    return request.app.state.chat_sessions.get(session_id)


@router.get("/chat", response_model=ChatState)
def chat_state(request: Request, session_id: str = Depends(get_session_id)):
    return request.app.state.chat_sessions.state(session_id)


@router.post("/chat/messages", response_model=ChatState)
async def send_chat_message(payload: ChatIn, widget: SupportChatWidget = Depends(get_widget)):
    """
    The shopper's message is in the returned history straight away; the bot
    reply shows up on a later GET once its timer fires.
    """
    widget.send_message(payload.text)
    return widget.state()


@router.post("/chat/ticket-form", response_model=ChatState)
def open_ticket_form(widget: SupportChatWidget = Depends(get_widget)):
    widget.open_ticket_form()
    return widget.state()


@router.delete("/chat/ticket-form", response_model=ChatState)
def back_to_chat(widget: SupportChatWidget = Depends(get_widget)):
    widget.back_to_chat()
    return widget.state()


@router.post("/tickets", response_model=ChatState, status_code=201)
async def submit_ticket(
    form: IssueForm,
    widget: SupportChatWidget = Depends(get_widget),
    user: Optional[User] = Depends(get_current_user),
):
    await widget.submit_ticket(user, form)
    logger.info(f"📨 Ticket submitted from chat: {form.title!r}")
    return widget.state(notice="Your issue has been reported. Our team will get back to you soon.")
