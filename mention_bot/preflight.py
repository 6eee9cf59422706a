#!/usr/bin/env python3
"""Check mention bot configuration and Slack credentials before starting."""

import os
import sys
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from .config import BRIDGE_REQUIRED, SLACK_REQUIRED, missing_variables
from .services.slack_service import create_web_client

REQUIRED_VARS = {
    "LLM endpoint": BRIDGE_REQUIRED,
    "Slack": SLACK_REQUIRED,
}


def mask(name: str, value: str) -> str:
    """Hide secret values, keeping only the first and last four characters."""
    if "KEY" in name or "TOKEN" in name or "SECRET" in name:
        return f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "***"
    return value


def check_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Print each required variable and report whether all are set."""
    env = os.environ if environ is None else environ

    print("\n📋 Checking configuration:")
    all_good = True

    for category, names in REQUIRED_VARS.items():
        print(f"\n{category}:")
        missing = set(missing_variables(names, env))
        for name in names:
            if name in missing:
                print(f"  ❌ {name}: NOT SET")
                all_good = False
            else:
                print(f"  ✅ {name}: {mask(name, env[name].strip())}")

    if env.get("SLACK_APP_TOKEN"):
        token = env["SLACK_APP_TOKEN"]
        if token.startswith("xapp-"):
            print("\n✅ SLACK_APP_TOKEN set, bot will run in Socket Mode")
        else:
            print("\n⚠️  SLACK_APP_TOKEN should start with 'xapp-'")
            all_good = False

    return all_good


def check_slack_auth(client: WebClient) -> bool:
    """Call auth.test and print the bot identity."""
    print("\n🔍 Testing Slack authentication...")
    try:
        response = client.auth_test()
    except SlackApiError as e:
        error = e.response["error"]
        print(f"❌ Slack API Error: {error}")
        if error == "invalid_auth":
            print("   Your SLACK_BOT_TOKEN is invalid or expired")
        return False
    except OSError as e:
        print(f"❌ Could not reach Slack: {e}")
        return False

    print(f"✅ Connected as: @{response['user']}")
    print(f"   Bot ID: {response['user_id']}")
    print(f"   Workspace: {response['team']}")
    return True


def run_checks(
    environ: Optional[Mapping[str, str]] = None,
    client_factory: Callable[[str], WebClient] = create_web_client,
) -> bool:
    env = os.environ if environ is None else environ

    if not check_environment(env):
        print("\n⚠️ Some required variables are missing or invalid")
        print("Please update your .env file")
        return False

    if not check_slack_auth(client_factory(env["SLACK_BOT_TOKEN"].strip())):
        return False

    print("\n✅ Configuration looks good!")
    print("   Start the bot with: mention-bot")
    return True


def main() -> None:
    load_dotenv()
    sys.exit(0 if run_checks() else 1)


if __name__ == "__main__":
    main()
