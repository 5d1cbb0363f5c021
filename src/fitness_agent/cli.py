"""CLI entrypoint for the fitness agent.

``fitness-agent chat`` runs an interactive conversation on one thread; the
human reviewer answers on the same terminal when the agent asks for approval.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid

from pydantic import ValidationError

from fitness_agent import __version__
from fitness_agent.core.agent import FitnessAgent, build_checkpoint_store, last_reply
from fitness_agent.core.config import AgentConfig
from fitness_agent.graph import GraphError, RunResult

logger = logging.getLogger(__name__)

EXIT_WORDS = frozenset({"exit", "quit"})


class ConsoleHumanInput:
    """Asks questions on stdin/stdout without blocking the event loop."""

    def __init__(self, prefix: str = "You") -> None:
        self.prefix = prefix

    async def ask(self, prompt: str) -> str:
        print("* Agent:", prompt)
        return await read_line(self.prefix)


async def read_line(prefix: str) -> str:
    return await asyncio.to_thread(input, f"> {prefix}: ")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fitness-agent",
        description="AI fitness assistant that prepares a simple diet plan",
    )
    parser.add_argument("--version", action="version", version=f"fitness-agent {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    chat = subparsers.add_parser("chat", help="Start an interactive conversation")
    chat.add_argument(
        "--thread-id",
        default=None,
        help="Conversation thread to continue (defaults to a new random id)",
    )

    show_state = subparsers.add_parser(
        "show-state",
        help="Print the persisted checkpoint of a thread (json checkpoint backend)",
    )
    show_state.add_argument("--thread-id", required=True, help="Thread to inspect")

    return parser


async def review_until_done(agent: FitnessAgent, result: RunResult) -> RunResult:
    """Answer interrupts from the terminal until the thread is no longer suspended."""

    while result.suspended:
        assert result.interrupt is not None
        print("* Agent:", result.interrupt.value)
        approval = await read_line("Approver")
        result = await agent.resume(approval, result.thread_id)
    return result


async def chat(agent: FitnessAgent, thread_id: str) -> int:
    logger.info("Conversation started", extra={"thread_id": thread_id})
    while True:
        text = await read_line("You")
        if text.strip().lower() in EXIT_WORDS:
            print("Thank you for using the AI Fitness Assistant. Goodbye!")
            return 0

        result = await agent.send(text, thread_id)
        result = await review_until_done(agent, result)

        assert result.state is not None
        reply = last_reply(result.state["messages"])
        if reply is None:
            raise RuntimeError("AI agent has not returned any response")
        print("* Agent:", reply)


async def _run_chat(agent: FitnessAgent, thread_id: str) -> int:
    try:
        return await chat(agent, thread_id)
    finally:
        await agent.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = AgentConfig()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    config.setup_logging()

    if args.command == "show-state":
        checkpoint = build_checkpoint_store(config.checkpoint).get(args.thread_id)
        if checkpoint is None:
            print(f"Unknown thread: {args.thread_id}", file=sys.stderr)
            return 1
        print(json.dumps(checkpoint.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return 0

    if args.command == "chat":
        thread_id = args.thread_id or uuid.uuid4().hex
        try:
            agent = FitnessAgent(config, human_input=ConsoleHumanInput())
        except ValueError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2

        try:
            return asyncio.run(_run_chat(agent, thread_id))
        except GraphError as e:
            logger.error("Conversation aborted", extra={"thread_id": thread_id, "error": str(e)})
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except (EOFError, KeyboardInterrupt):
            return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
