"""
Data types passed between the Slack listener, the dispatcher and the LLM service.

Slack events are narrowed into a closed set of variants (MentionEvent,
PlainMessageEvent, OtherEvent) before dispatch, and every LLM call ends in a
CompletionResult (Success or Failure) rather than an exception.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass(frozen=True)
class MentionEvent:
    """The bot was @mentioned in a conversation"""
    conversation_id: str  # channel id
    thread_anchor: str  # ts of the message to reply under
    text: str  # raw text, may include <@U...> mention syntax
    sender_team_id: Optional[str] = None

    def is_addressable(self) -> bool:
        """Both the channel and the thread anchor are known."""
        return bool(self.conversation_id) and bool(self.thread_anchor)


@dataclass(frozen=True)
class PlainMessageEvent:
    """A channel or DM message that did not mention the bot"""
    conversation_id: str
    text: str
    subtype: Optional[str] = None


@dataclass(frozen=True)
class OtherEvent:
    """Any other Events API event type"""
    kind: str


SlackEvent = Union[MentionEvent, PlainMessageEvent, OtherEvent]


def parse_slack_event(event: Mapping[str, Any]) -> SlackEvent:
    """
    Narrow a raw Slack event payload into one of the SlackEvent variants.

    Args:
        event: The "event" object of an Events API callback

    Returns:
        MentionEvent for app_mention, PlainMessageEvent for message, OtherEvent otherwise
    """
    kind = event.get("type") or ""

    if kind == "app_mention":
        # Mentions inside a thread must be answered in that thread, not under the reply
        return MentionEvent(
            conversation_id=event.get("channel") or "",
            thread_anchor=event.get("thread_ts") or event.get("ts") or "",
            text=event.get("text") or "",
            sender_team_id=event.get("team"),
        )

    if kind == "message":
        return PlainMessageEvent(
            conversation_id=event.get("channel") or "",
            text=event.get("text") or "",
            subtype=event.get("subtype"),
        )

    return OtherEvent(kind=kind or "unknown")


@dataclass(frozen=True)
class CompletionRequest:
    """One chat completion call"""
    model: str
    user_content: str
    system_prompt: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = []
        if self.system_prompt:
            messages.append({"role": "developer", "content": self.system_prompt})
        messages.append({"role": "user", "content": self.user_content})
        return {"model": self.model, "messages": messages}


class FailureReason(str, Enum):
    """Why a completion could not be produced"""
    TRANSPORT_ERROR = "transport_error"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class Success:
    text: str  # may be empty


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    status: Optional[int] = None  # HTTP status for UPSTREAM_ERROR
    detail: str = ""

    def describe(self) -> str:
        if self.status is not None:
            return f"{self.reason.value} (HTTP {self.status})"
        if self.detail:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value


CompletionResult = Union[Success, Failure]
