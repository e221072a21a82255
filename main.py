from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from agent import SuperAgent
from config import AgentConfig
from history import HistoryFileError


def configure_logging() -> None:
    """Initialise logging for the command line client."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch pages with a rotating User-Agent")
    parser.add_argument("urls", nargs="*", help="URLs to fetch, in order")
    parser.add_argument("--source", help="Source identifier the rate limit is keyed on")
    parser.add_argument(
        "--rate-limit",
        type=int,
        help="Maximum requests per origin and source (0 disables the limit)",
    )
    parser.add_argument(
        "--no-rotate",
        action="store_true",
        help="Keep the same User-Agent for every request.",
    )
    parser.add_argument("--load-history", help="Tab-delimited history file to load first.")
    parser.add_argument(
        "--dump-history",
        help="File the history is appended to after fetching (default: SUPERAGENT_HISTORY_PATH).",
    )
    return parser


def apply_overrides(config: AgentConfig, args: argparse.Namespace) -> AgentConfig:
    updates: Dict[str, Any] = {}
    if args.source:
        updates["source"] = args.source
    if args.rate_limit is not None:
        updates["rate_limit"] = args.rate_limit
    if args.no_rotate:
        updates["rotate_identity"] = False
    return config.model_copy(update=updates)


async def fetch_all(agent: SuperAgent, urls: Sequence[str]) -> List[Dict[str, Any]]:
    payload: List[Dict[str, Any]] = []
    for url in urls:
        before = len(agent.history)
        body = await agent.fetch(url)
        history = agent.history
        record = history[-1] if len(history) > before else None
        payload.append(
            {
                "url": url,
                "identity": record.identity if record else None,
                "status_code": record.status_code if record else None,
                "body": body,
            }
        )
    return payload


async def run(argv: Optional[Sequence[str]] = None) -> int:
    """Bootstrap coroutine for the command line client."""
    load_dotenv()
    configure_logging()
    args = build_parser().parse_args(argv)
    if args.rate_limit is not None and args.rate_limit < 0:
        logging.error("--rate-limit must be >= 0")
        return 1
    config = apply_overrides(AgentConfig(), args)
    dump_path = args.dump_history or config.history_path

    async with SuperAgent.from_config(config) as agent:
        logging.info(
            "Agent initialised",
            extra={"source": agent.source, "rate_limit": agent.rate_limit},
        )
        try:
            if args.load_history:
                agent.load_history(args.load_history)
            payload = await fetch_all(agent, args.urls)
            if dump_path:
                agent.dump_history(dump_path)
        except HistoryFileError as exc:
            logging.error("History file error: %s", exc)
            return 1

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
