"""
Handler for Slack app mention events

Listeners hand each event to the MentionDispatcher and return straight away;
the LLM call and the thread reply run on a bounded worker pool.
"""

import re
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

from slack_bolt import App

from ..config import BridgeConfig
from ..errors import ReplyDeliveryError
from ..models import (
    Failure,
    FailureReason,
    MentionEvent,
    OtherEvent,
    PlainMessageEvent,
    SlackEvent,
    Success,
    parse_slack_event,
)
from ..services.llm_service import ResponseGenerator
from ..services.slack_service import SlackReplier
from ..utils.logger import logger


class MentionDispatcher:
    """Turns one mention into one threaded reply."""

    def __init__(
        self,
        generator: ResponseGenerator,
        replier: SlackReplier,
        config: BridgeConfig,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.generator = generator
        self.replier = replier
        self.config = config
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="mention",
        )

    def dispatch(self, event: SlackEvent) -> Optional[Future]:
        """Route a parsed Slack event. Only mentions produce work."""
        if isinstance(event, MentionEvent):
            return self.on_mention(event)
        if isinstance(event, PlainMessageEvent):
            logger.info(f"Ignoring plain message in {event.conversation_id or '?'} (subtype={event.subtype})")
            return None
        if isinstance(event, OtherEvent):
            logger.info(f"Ignoring unsupported event: {event.kind}")
            return None
        raise TypeError(f"Unknown event variant: {type(event).__name__}")

    def on_mention(self, event: MentionEvent) -> Optional[Future]:
        """
        Accept a mention for processing.

        Args:
            event: The mention to answer

        Returns:
            Future for the background task, or None if the event was dropped
        """
        if not event.is_addressable():
            logger.warning(
                f"Dropping mention without addressing: channel={event.conversation_id!r}, "
                f"ts={event.thread_anchor!r}"
            )
            return None

        logger.info(
            f"Mention received: channel={event.conversation_id}, ts={event.thread_anchor}, "
            f"chars={len(event.text)}"
        )
        future = self.executor.submit(self._handle_mention, event)
        future.add_done_callback(_log_task_crash)
        return future

    def _handle_mention(self, event: MentionEvent) -> None:
        try:
            result = self.generator.generate(event.text)
        except Exception:
            # Every addressable mention still gets exactly one reply
            logger.exception(f"Completion raised for {event.conversation_id}/{event.thread_anchor}")
            result = Failure(FailureReason.TRANSPORT_ERROR, detail="unexpected error")

        if isinstance(result, Success):
            text = result.text
        elif isinstance(result, Failure):
            logger.warning(
                f"Completion failed for {event.conversation_id}/{event.thread_anchor}: {result.describe()}"
            )
            text = self.config.fallback_message
        else:
            raise TypeError(f"Unknown completion result: {type(result).__name__}")

        try:
            self.replier.reply_in_thread(event.conversation_id, event.thread_anchor, text)
        except ReplyDeliveryError as e:
            # Not retried: a second attempt could post a duplicate reply
            logger.error(f"Failed to deliver reply to {e.channel}/{e.thread_ts}: {e}")
            return

        logger.info(f"Replied in {event.conversation_id} thread {event.thread_anchor}")

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


def _log_task_crash(future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Mention task crashed: {type(error).__name__}: {error}", exc_info=error)


def make_event_listener(dispatcher: MentionDispatcher):
    """Build the Bolt listener that feeds events to the dispatcher."""

    def handle_event(event: Dict[str, Any]) -> None:
        dispatcher.dispatch(parse_slack_event(event))

    return handle_event


def register_handlers(app: App, dispatcher: MentionDispatcher) -> None:
    """Register event listeners on the Bolt app.

    Bolt runs the first matching listener, so the catch-all comes last.
    """
    handle_event = make_event_listener(dispatcher)
    app.event("app_mention")(handle_event)
    app.event("message")(handle_event)
    app.event(re.compile(".*"))(handle_event)
