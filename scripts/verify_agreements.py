#!/usr/bin/env python
"""CLI utility to check stored agreements against the on-chain registry."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional
from uuid import UUID

from sqlalchemy import select

from app.core.database import session_scope
from app.models.agreement import UNKNOWN_ON_CHAIN_ID, Agreement
from app.services.errors import ServiceError
from app.services.ledger import get_ledger_client


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify agreement content ids against the ledger.")
    parser.add_argument("--property-id", type=UUID, default=None, help="Only check agreements for this property.")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of agreements to check.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ledger = get_ledger_client()
    checked = skipped = 0
    mismatches: list[str] = []

    try:
        with session_scope() as session:
            stmt = select(Agreement).order_by(Agreement.created_at)
            if args.property_id:
                stmt = stmt.where(Agreement.property_id == args.property_id)
            if args.limit:
                stmt = stmt.limit(args.limit)

            for agreement in session.scalars(stmt):
                if agreement.on_chain_id == UNKNOWN_ON_CHAIN_ID:
                    logging.warning("Agreement %s has no on-chain id (tx %s)", agreement.id, agreement.tx_hash)
                    skipped += 1
                    continue
                checked += 1
                if not ledger.verify(agreement.on_chain_id, agreement.content_id):
                    mismatches.append(str(agreement.id))
                    logging.error(
                        "Agreement %s does not match on-chain record %s",
                        agreement.id,
                        agreement.on_chain_id,
                    )
    except ServiceError as exc:
        logging.error("Agreement verification failed: %s", exc)
        return 2

    if mismatches:
        logging.error("%s of %s agreements failed verification", len(mismatches), checked)
        return 1

    logging.info("Verified %s agreements (%s skipped without on-chain id)", checked, skipped)
    return 0


if __name__ == "__main__":
    sys.exit(main())
