import logging
import sys
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler
from slack_sdk import WebClient

from .config import BridgeConfig, SlackConfig, load_bridge_config, load_slack_config
from .errors import ConfigError
from .handlers import MentionDispatcher, register_handlers
from .server import create_server
from .services import ResponseGenerator, SlackReplier, create_web_client
from .utils.logger import logger


def build_dispatcher(config: BridgeConfig, web_client: WebClient) -> MentionDispatcher:
    return MentionDispatcher(
        generator=ResponseGenerator(config),
        replier=SlackReplier(web_client),
        config=config,
    )


def build_app(
    slack_config: SlackConfig,
    dispatcher: MentionDispatcher,
    web_client: Optional[WebClient] = None,
    token_verification_enabled: bool = True,
) -> App:
    """Create the Bolt app and register event handlers."""
    web_client = web_client or create_web_client(slack_config.bot_token.get_secret_value())

    app = App(
        client=web_client,
        signing_secret=slack_config.signing_secret.get_secret_value(),
        token_verification_enabled=token_verification_enabled,
        logger=logging.getLogger("mention_bot.bolt"),
    )
    register_handlers(app, dispatcher)
    return app


def main() -> None:
    load_dotenv()

    try:
        bridge_config = load_bridge_config()
        slack_config = load_slack_config()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("Starting mention bot")

    web_client = create_web_client(slack_config.bot_token.get_secret_value())
    dispatcher = build_dispatcher(bridge_config, web_client)
    app = build_app(slack_config, dispatcher, web_client)

    try:
        if slack_config.socket_mode:
            logger.info("Running in Socket Mode")
            handler = SocketModeHandler(app, slack_config.app_token.get_secret_value())
            handler.start()
        else:
            logger.info(
                f"Serving Slack events on http://{slack_config.host}:{slack_config.port}"
                f"{slack_config.events_path}"
            )
            uvicorn.run(create_server(app, slack_config), host=slack_config.host, port=slack_config.port)
    finally:
        dispatcher.shutdown(wait=True)
        dispatcher.generator.close()


if __name__ == "__main__":
    main()
