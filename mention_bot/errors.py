"""Exception types raised by the mention bridge."""


class BridgeError(Exception):
    """Base class for mention bot errors."""


class ConfigError(BridgeError):
    """Required configuration is missing or invalid. Fatal at startup."""


class ReplyDeliveryError(BridgeError):
    """Posting a reply into a Slack thread failed."""

    def __init__(self, message: str, channel: str = "", thread_ts: str = ""):
        super().__init__(message)
        self.channel = channel
        self.thread_ts = thread_ts
