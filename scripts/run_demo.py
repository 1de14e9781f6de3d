"""Evaluate the demo athlete from the command line."""
from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from gameday.logging_config import configure_logging
from gameday.services.chat_session import ChatSession
from gameday.services.demo_data import demo_game, demo_metrics
from gameday.services.game_day import GameDayCoach


logger = logging.getLogger("demo")


async def run_demo(
    question: str | None = None,
    locale: str | None = None,
    coach: GameDayCoach | None = None,
) -> Dict[str, Any]:
    """
    Score the demo athlete and, optionally, ask the coach one question.

    Returns:
        dict: readiness, recommendation, mode and (when asked) the coach reply
    """
    now = datetime.now(timezone.utc)
    game = demo_game(now)
    metrics = demo_metrics(now)
    coach = coach or GameDayCoach()

    evaluation = await coach.evaluate(game, metrics, locale=locale, now=now)
    logger.info(
        "Demo readiness | score=%d | label=%s | mode=%s",
        evaluation.readiness.score,
        evaluation.readiness.label,
        evaluation.mode,
    )

    summary: Dict[str, Any] = {
        "game": game.title,
        "kickoff": evaluation.kickoff_badge,
        "readiness": evaluation.readiness.model_dump(),
        "recommendation": evaluation.recommendation.model_dump(),
        "mode": evaluation.mode,
    }

    if question:
        session = ChatSession()
        reply = await coach.send_chat_message(
            session, question, game, metrics, evaluation=evaluation, locale=locale, now=now
        )
        summary["reply"] = reply.text if reply else None

    return summary


def _print_summary(summary: Dict[str, Any]) -> None:
    readiness = summary["readiness"]
    recommendation = summary["recommendation"]
    print(f"{summary['game']} (kickoff in {summary['kickoff']}) - {summary['mode']}")
    print(f"Readiness: {readiness['score']} ({readiness['label']})")
    print(f"Top factors: {', '.join(readiness['top_factors'])}")
    print(f"Next action: {recommendation['next_action']}")
    for tip in recommendation["tips"]:
        print(f"  - {tip}")
    if summary.get("reply"):
        print(f"Coach: {summary['reply']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a demo readiness evaluation")
    parser.add_argument("--ask", dest="question", help="Ask the coach a question after evaluating")
    parser.add_argument("--lang", dest="locale", help="Locale for the generative coach (e.g. en-US)")
    args = parser.parse_args()

    configure_logging()
    _print_summary(asyncio.run(run_demo(question=args.question, locale=args.locale)))
