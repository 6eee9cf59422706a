from .llm_service import ResponseGenerator
from .slack_service import SlackReplier, create_web_client

__all__ = ["ResponseGenerator", "SlackReplier", "create_web_client"]
