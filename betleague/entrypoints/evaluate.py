"""Evaluation entrypoint for admin shells and scheduled jobs.

Runs one evaluation through the action layer and prints the JSON response.
Exit code 0 on success, 1 on failure.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from betleague.actions import INTERNAL_ERROR_MESSAGE, EvaluationService, Principal, failure, load_principal
from betleague.config import load_settings, sanitize_dict
from betleague.database.dbm import DBM
from betleague.database.init import initialize
from betleague.evaluation.types import ErrorCode
from betleague.shared.enums import BetCategory
from betleague.shared.logging import close_events_logger, configure_logging
from betleague.shared.rows import EvaluationResponse

logger = logging.getLogger("betleague.entrypoints.evaluate")

CATEGORY_CHOICES = {
    "match": BetCategory.MATCH,
    "series": BetCategory.SERIES,
    "single": BetCategory.SINGLE_BET,
    "question": BetCategory.QUESTION,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate league bets")
    parser.add_argument("--category", required=True, choices=sorted(CATEGORY_CHOICES))
    parser.add_argument("--bet-id", type=int, required=True, help="Bet instance id")
    parser.add_argument("--user-id", type=int, default=None, help="Only evaluate this user's prediction")
    parser.add_argument("--admin-id", type=int, required=True, help="Administrator running the evaluation")
    parser.add_argument("--init-db", action="store_true", help="Create tables and seed the evaluator catalog first")
    parser.add_argument("--config", default=None, help="YAML settings file")
    return parser


async def _prepare(dbm: DBM, args: argparse.Namespace) -> Optional[Principal]:
    if args.init_db:
        await initialize(dbm)
    return await load_principal(dbm, args.admin_id)


async def run(args: argparse.Namespace) -> EvaluationResponse:
    settings = load_settings(args.config)
    configure_logging(settings)
    logger.debug({"settings": sanitize_dict(settings.model_dump())})

    dbm = DBM(settings)
    try:
        try:
            principal = await _prepare(dbm, args)
        except SQLAlchemyError:
            logger.exception({"evaluate_cli": {"event": "datastore_error", "init_db": args.init_db}})
            return failure(INTERNAL_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR)
        service = EvaluationService(dbm, settings)
        payload = {"betInstanceId": args.bet_id}
        if args.user_id is not None:
            payload["userId"] = args.user_id
        return await service.evaluate(CATEGORY_CHOICES[args.category], payload, principal)
    finally:
        await dbm.dispose()
        close_events_logger()


def main(argv: Optional[Sequence[str]] = None) -> int:
    if os.environ.get("BETLEAGUE_TEST_MODE") != "true":
        load_dotenv()

    args = build_parser().parse_args(argv)
    response = asyncio.run(run(args))
    print(json.dumps(response, indent=2, default=str))
    return 0 if response.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
