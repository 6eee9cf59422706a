"""HTTP entry point for Slack Events API requests."""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from slack_bolt import App
from slack_bolt.adapter.fastapi import SlackRequestHandler

from .config import SlackConfig


def create_server(app: App, slack_config: SlackConfig) -> FastAPI:
    """Expose the Bolt app at the configured events path, plus a health check."""
    api = FastAPI(title="mention-bot")
    handler = SlackRequestHandler(app)

    @api.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        return "OK"

    @api.post(slack_config.events_path)
    async def slack_events(req: Request):
        return await handler.handle(req)

    return api
