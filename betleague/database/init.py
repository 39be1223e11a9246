from __future__ import annotations

import logging
from time import monotonic

from sqlalchemy import select

from betleague.database.dbm import DBM
from betleague.database.schema import Base, EvaluatorType
from betleague.evaluation.catalog import EVALUATOR_KINDS

logger = logging.getLogger(__name__)


async def initialize(dbm: DBM) -> int:
    """Create missing tables and seed the evaluator_type catalog.

    Idempotent. Returns the number of catalog rows inserted.
    """
    started = monotonic()
    logger.info({"db_init": {"event": "create_all_start", "dialect": dbm.dialect}})
    try:
        async with dbm.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as exc:
        logger.error({"db_init": {"event": "create_all_error", "error": str(exc)}})
        raise

    inserted = 0
    async with dbm.session() as session:
        async with session.begin():
            existing = set((await session.execute(select(EvaluatorType.name))).scalars().all())
            for kind in EVALUATOR_KINDS.values():
                if kind.name in existing:
                    continue
                session.add(EvaluatorType(name=kind.name, category=kind.category))
                inserted += 1

    logger.info(
        {
            "db_init": {
                "event": "complete",
                "evaluator_types_inserted": inserted,
                "elapsed_seconds": round(monotonic() - started, 3),
            }
        }
    )
    return inserted


__all__ = ["initialize"]
