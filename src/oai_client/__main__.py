"""Example program: list the model catalog, then ask for a one line haiku."""

import argparse
import asyncio
import logging
import os
import sys

from .client import OpenAIClient
from .config import DEFAULT_MODEL, OPENAI_API_BASE
from .errors import OpenAIClientError
from .models import CompletionRequest, Message

logger = logging.getLogger("oai_client")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="oai-client", description=__doc__)
    parser.add_argument("--base-url", default=OPENAI_API_BASE, help="Preset name or API base URL")
    parser.add_argument("--model", default=DEFAULT_MODEL or "gpt-3.5-turbo")
    parser.add_argument("--prompt", default="Write a 1 line haiku")
    parser.add_argument("--verbose", action="store_true", help="Log raw response bodies")
    return parser.parse_args(argv)


async def run(client: OpenAIClient, model: str, prompt: str, verbose: bool = False) -> None:
    models = await client.list_models()
    for m in models:
        print(f"{m.id} ({m.owned_by})")

    request = CompletionRequest(
        model=model,
        messages=[
            Message(role="system", content="You are a helpful assistant"),
            Message(role="user", content=prompt),
        ],
        max_tokens=64,
        temperature=0,
    )
    completion = await client.complete(request, verbose=verbose)
    for choice in completion.choices:
        print(f"Choice:\n {choice.message.content}")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if not os.environ.get("OPENAI_API_KEY"):
        logger.info("Please set your API key (OPENAI_API_KEY) and optionally OPENAI_ORGANIZATION_ID")
        return 2

    try:
        client = OpenAIClient.from_env(base_url=args.base_url)
        asyncio.run(run(client, args.model, args.prompt, verbose=args.verbose))
    except OpenAIClientError as e:
        logger.error(f"Request failed: {str(e)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
