#!/usr/bin/env python3
"""Programmatic conversation example.

This demonstrates driving the agent without the interactive CLI:

* load settings from `.env`
* send one user message on a thread
* answer every interrupt (follow-up question or human review) from argv

Answers are consumed in order; once they run out the thread is left
suspended and can be resumed later with the same thread id.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from fitness_agent.core.agent import FitnessAgent, last_reply
from fitness_agent.core.config import AgentConfig


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ask for a diet plan (programmatic example).")
    parser.add_argument("--thread-id", default="example", help="Conversation thread id")
    parser.add_argument("message", help='First user message, e.g. "vegan, beginner"')
    parser.add_argument(
        "answers",
        nargs="*",
        help="Replies to follow-up questions and the approval prompt, in order",
    )
    return parser.parse_args(argv)


async def _converse(agent: FitnessAgent, args: argparse.Namespace) -> int:
    try:
        return await _ask(agent, args)
    finally:
        await agent.aclose()


async def _ask(agent: FitnessAgent, args: argparse.Namespace) -> int:
    answers = list(args.answers)
    result = await agent.send(args.message, args.thread_id)

    while result.suspended and answers:
        assert result.interrupt is not None
        answer = answers.pop(0)
        print(f"? {result.interrupt.value}")
        print(f"> {answer}")
        result = await agent.resume(answer, result.thread_id)

    if result.suspended:
        assert result.interrupt is not None
        print(f"Thread {result.thread_id} is waiting at {result.interrupt.node}:")
        print(result.interrupt.value)
        return 0

    assert result.state is not None
    print(last_reply(result.state["messages"]))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = AgentConfig()
    config.setup_logging()

    # Without a human-input collaborator every question surfaces as an interrupt.
    agent = FitnessAgent(config)
    return asyncio.run(_converse(agent, args))


if __name__ == "__main__":
    raise SystemExit(main())
