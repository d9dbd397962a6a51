#!/usr/bin/env python3
"""Script to check the upstream DeepSeek configuration.

Validates the credential, lists models, and optionally sends one message
through the gateway.

Usage:
  python scripts/check_upstream.py [--message "hello"] [--system "be terse"]
"""

import argparse
import sys
from pathlib import Path

# Add project root to sys.path so we can import gateway packages
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

from gateway.api.schemas import ChatInput
from gateway.core.chat_gateway import available_models, check_credential, process_chat
from gateway.core.config import load_settings
from gateway.core.errors import ChatRequestError


def main():
    parser = argparse.ArgumentParser(description="Check the DeepSeek gateway upstream.")
    parser.add_argument("--message", "-m", help="Send one chat message and print the result")
    parser.add_argument("--system", "-s", help="Optional system prompt for --message")
    parser.add_argument("--model", default="deepseek-chat", help="Model for --message")
    args = parser.parse_args()

    load_dotenv(project_root / ".env")
    settings = load_settings()

    print(f"Upstream: {settings.base_url}")
    if not settings.credential_configured:
        print("  DEEPSEEK_API_KEY is not set.")
        return 1

    valid = check_credential(settings.api_key, settings.base_url, timeout=settings.timeout)
    print(f"  Credential: {'valid' if valid else 'rejected'}")

    model_list = available_models(settings.api_key, settings.base_url, timeout=settings.timeout)
    suffix = " (static fallback)" if model_list.fallback else ""
    print(f"  Models: {', '.join(model_list.models)}{suffix}")

    if args.message:
        chat_input = ChatInput(message=args.message, model=args.model, system_prompt=args.system)
        try:
            result = process_chat(chat_input, settings.api_key, settings.base_url,
                                  timeout=settings.timeout)
        except ChatRequestError as e:
            print(f"  Chat failed [{e.kind}]: {e.message}")
            return 1
        print(result.model_dump_json(by_alias=True, indent=2))

    return 0 if valid else 1


if __name__ == "__main__":
    sys.exit(main())
