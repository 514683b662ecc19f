"""Webhook event dispatch."""
import logging
from typing import Any, Awaitable, Callable, Dict

from clawcast.services.call_session.store import SessionStore
from clawcast.services.completion.base import CompletionBackend
from clawcast.services.events import extract
from clawcast.services.events.kinds import (
    CALL_ENDED_STATUS,
    INFORMATIONAL_KINDS,
    EventKind,
)
from clawcast.services.events.replies import (
    BACKEND_UNAVAILABLE_REPLY,
    FUNCTION_CALL_REPLY,
    NO_USER_MESSAGE_REPLY,
    acknowledge,
    say,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Dict[str, Any]]]


class EventRouter:
    """
    Turns one decoded webhook event into the response the platform expects.

    Every input, whatever its shape, produces a response. Conversation state
    lives in the session store; the router itself keeps none between events.
    """

    def __init__(
        self,
        store: SessionStore,
        backend: CompletionBackend,
        system_prompt: str,
    ):
        self.store = store
        self.backend = backend
        self.system_prompt = system_prompt
        self._handlers: Dict[EventKind, Handler] = {
            EventKind.ASSISTANT_REQUEST: self._handle_assistant_request,
            EventKind.FUNCTION_CALL: self._handle_function_call,
            EventKind.STATUS_UPDATE: self._handle_status_update,
            EventKind.TRANSCRIPT: self._handle_transcript,
        }

    async def handle(self, event: Any) -> Dict[str, Any]:
        """Dispatch an event to its handler."""
        raw_type = extract.event_type(event)
        kind = EventKind.classify(raw_type)
        logger.debug(f"[EVENT] Event: {raw_type or EventKind.UNKNOWN}")

        handler = self._handlers.get(kind)
        if handler is not None:
            return await handler(event)
        if kind not in INFORMATIONAL_KINDS:
            logger.debug(f"[EVENT] Unhandled event: {raw_type or EventKind.UNKNOWN}")
        return acknowledge()

    async def _handle_assistant_request(self, event: Any) -> Dict[str, Any]:
        call_id = extract.call_id(event) or extract.DEFAULT_CALL_ID
        user_text = extract.last_user_message(event)

        if user_text is None:
            logger.info(f"[ASSISTANT REQUEST] No user message - CallId: {call_id}")
            return say(NO_USER_MESSAGE_REPLY)

        logger.info(f'[ASSISTANT REQUEST] User said: "{user_text}" - CallId: {call_id}')

        # Record the caller's turn before the backend call so a failure keeps it
        self.store.append_user_turn(call_id, user_text)
        history = self.store.snapshot(call_id)

        try:
            reply = await self.backend.complete(history, self.system_prompt)
        except Exception as e:
            logger.error(
                f"[ASSISTANT REQUEST] LLM error - CallId: {call_id}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return say(BACKEND_UNAVAILABLE_REPLY)

        self.store.append_assistant_turn(call_id, reply)
        logger.info(f'[ASSISTANT REQUEST] Agent says: "{reply}" - CallId: {call_id}')
        return say(reply)

    async def _handle_function_call(self, event: Any) -> Dict[str, Any]:
        logger.info(f"[FUNCTION CALL] Function call: {extract.function_name(event)}")
        return say(FUNCTION_CALL_REPLY)

    async def _handle_status_update(self, event: Any) -> Dict[str, Any]:
        status = extract.status(event)
        logger.info(f"[CALL STATUS] Call status: {status}")

        if status == CALL_ENDED_STATUS:
            call_id = extract.call_id(event)
            if call_id is not None and self.store.remove(call_id):
                logger.info(f"[CALL STATUS] Cleaned up conversation - CallId: {call_id}")
            else:
                logger.debug(f"[CALL STATUS] No conversation to clean up - CallId: {call_id}")
        return acknowledge()

    async def _handle_transcript(self, event: Any) -> Dict[str, Any]:
        transcript = extract.transcript(event)
        logger.debug(
            f"[TRANSCRIPT] Transcript: {transcript.get('text')} ({transcript.get('role')})"
        )
        return acknowledge()
