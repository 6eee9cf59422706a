"""
Mention Bot Package

A Slack bot that answers @mentions in-thread with a completion from an LLM endpoint.
"""

__version__ = "0.1.0"

from .config import BridgeConfig, SlackConfig, load_bridge_config, load_slack_config
from .errors import BridgeError, ConfigError, ReplyDeliveryError

__all__ = [
    "BridgeConfig",
    "SlackConfig",
    "load_bridge_config",
    "load_slack_config",
    "BridgeError",
    "ConfigError",
    "ReplyDeliveryError",
]
