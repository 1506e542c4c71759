import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Set
from uuid import uuid4

from cachetools import TTLCache
from pydantic import BaseModel

from storefront.core.config import settings
from storefront.domain.errors import (
    AuthenticationRequired,
    DataStoreError,
    FormValidationError,
    TicketSubmissionFailed,
)
from storefront.domain.models import ChatMessage, IssueForm, SupportIssue, User
from storefront.domain.responses import (
    GREETING,
    TICKET_CREATED,
    TICKET_SUGGESTION,
    pick_response,
    wants_ticket,
)
from storefront.interfaces.IIssueRepository import IIssueRepository

logger = logging.getLogger(__name__)


class ChatView(str, Enum):
    CONVERSATION = "conversation"
    TICKET_FORM = "ticket-form"


class ChatState(BaseModel):
    view: ChatView
    messages: List[ChatMessage]
    form: IssueForm
    notice: Optional[str] = None


class SupportChatWidget:
    """
    Scripted support chat for one shopper.

    Replies come from a fixed keyword table after a fixed delay; there is no
    intent detection. Switching between the conversation and the ticket form
    only happens when the shopper asks for it.
    """

    def __init__(
        self,
        issue_repo: IIssueRepository,
        reply_delay: Optional[float] = None,
        suggestion_delay: Optional[float] = None,
    ):
        self.issue_repo = issue_repo
        self.reply_delay = settings.CHAT_REPLY_DELAY if reply_delay is None else reply_delay
        self.suggestion_delay = settings.CHAT_SUGGESTION_DELAY if suggestion_delay is None else suggestion_delay

        self.view = ChatView.CONVERSATION
        self.form = IssueForm()
        self.messages: List[ChatMessage] = []
        self._pending: Set[asyncio.Task] = set()

        self._append(GREETING, is_bot=True)

    # --- conversation ---

    def send_message(self, text: str) -> Optional[ChatMessage]:
        """
        Append the shopper's message now and schedule the bot's answer.
        Must be called from inside a running event loop.
        """
        if not text.strip():
            return None

        user_message = self._append(text, is_bot=False)

        self._schedule(self.reply_delay, pick_response(text))
        # Separate timer, not chained to the reply above
        if wants_ticket(text):
            self._schedule(self.suggestion_delay, TICKET_SUGGESTION)

        return user_message

    async def wait_idle(self):
        """Wait for every scheduled bot message to land."""
        pending = list(self._pending)
        if pending:
            await asyncio.gather(*pending)

    # --- view switching ---

    def open_ticket_form(self):
        self.view = ChatView.TICKET_FORM

    def back_to_chat(self):
        self.view = ChatView.CONVERSATION

    # --- tickets ---

    async def submit_ticket(self, user: Optional[User], form: Optional[IssueForm] = None) -> ChatMessage:
        if form is not None:
            self.form = form

        if user is None:
            raise AuthenticationRequired("You need to be logged in to create a support ticket.")

        missing = [name for name in ("title", "description") if not getattr(self.form, name).strip()]
        if missing:
            raise FormValidationError(missing, "Please fill in the title and description.")

        issue = SupportIssue(
            user_id=user.id,
            title=self.form.title,
            description=self.form.description,
            category=self.form.category,
            priority=self.form.priority,
        )

        try:
            await self.issue_repo.create_issue(issue, access_token=user.access_token)
        except DataStoreError as e:
            # Form stays filled in so the shopper can resubmit by hand
            logger.error(f"❌ Issue insert failed for user {user.id}: {e}")
            raise TicketSubmissionFailed() from e

        logger.info(f"✅ Support ticket created for user {user.id} ({issue.category.value}/{issue.priority.value})")

        confirmation = self._append(TICKET_CREATED, is_bot=True)
        self.form = IssueForm()
        self.view = ChatView.CONVERSATION
        return confirmation

    def state(self, notice: Optional[str] = None) -> ChatState:
        return ChatState(view=self.view, messages=list(self.messages), form=self.form, notice=notice)

    # --- internals ---

    def _append(self, text: str, is_bot: bool) -> ChatMessage:
        message = ChatMessage(
            id=uuid4().hex,
            text=text,
            is_bot=is_bot,
            timestamp=datetime.now(timezone.utc),
        )
        self.messages.append(message)
        return message

    def _schedule(self, delay: float, text: str):
        task = asyncio.get_running_loop().create_task(self._say_later(delay, text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _say_later(self, delay: float, text: str):
        await asyncio.sleep(delay)
        self._append(text, is_bot=True)


class ChatSessionRegistry:
    """
    One widget per browser session, held in this process only. Bounded, and
    a widget nobody has touched for the session TTL is dropped.
    """

    def __init__(
        self,
        issue_repo: IIssueRepository,
        maxsize: Optional[int] = None,
        ttl: Optional[float] = None,
        timer=time.monotonic,
    ):
        self.issue_repo = issue_repo
        self._widgets: TTLCache = TTLCache(
            maxsize=maxsize or settings.SESSION_CACHE_SIZE,
            ttl=ttl or settings.SESSION_TTL_SECONDS,
            timer=timer,
        )

    def get(self, session_id: str) -> SupportChatWidget:
        widget = self._widgets.get(session_id)
        if widget is None:
            widget = SupportChatWidget(self.issue_repo)
        # Re-inserting restarts the expiry clock
        self._widgets[session_id] = widget
        return widget

    def peek(self, session_id: str) -> Optional[SupportChatWidget]:
        return self._widgets.get(session_id)

    def state(self, session_id: str) -> ChatState:
        """Read-only view; an unknown session sees the greeting but is not stored."""
        widget = self.peek(session_id) or SupportChatWidget(self.issue_repo)
        return widget.state()
