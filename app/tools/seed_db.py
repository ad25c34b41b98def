"""Seed the authority table from CSV files.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --data-dir data
    python -m app.tools.seed_db --drop  # drop existing authorities first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.csv_loader.loader import load_authorities
from app.adapters.persistence.database import async_session_factory
from app.adapters.persistence.models import AuthorityModel
from app.domain.errors import GeometryMalformedError
from app.domain.value_objects.boundary import Boundary

logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    await session.execute(delete(AuthorityModel))
    await session.commit()
    logger.info("Dropped all existing authorities")


def _check_polygon(authority_id: str, ring: list | None) -> None:
    """Warn about rings the polygon tier will skip; the data is stored as is."""
    if ring is None:
        return
    try:
        if Boundary.from_lat_lon_pairs(ring).is_degenerate():
            logger.warning("Authority '%s': polygon is degenerate or self-intersecting", authority_id)
    except GeometryMalformedError as e:
        logger.warning("Authority '%s': malformed polygon (%s)", authority_id, e)


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"authorities": 0, "skipped": 0}

    authority_csv = _find_csv(data_dir, ["authorities", "authority", "departments"])
    if not authority_csv:
        raise FileNotFoundError(
            f"No authorities CSV found in {data_dir}. Expected something like authorities.csv"
        )

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        for ad in load_authorities(authority_csv):
            existing = await session.get(AuthorityModel, ad["id"])
            if existing is not None:
                logger.debug("Authority '%s' already exists, skipping", ad["id"])
                counts["skipped"] += 1
                continue

            _check_polygon(ad["id"], ad["polygon"])
            session.add(AuthorityModel(**ad))
            counts["authorities"] += 1

        await session.commit()

    logger.info(
        "Seed complete: %d authorities (%d already present)",
        counts["authorities"], counts["skipped"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in data_dir.glob("*.csv"):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        authorities = (await session.execute(select(AuthorityModel))).scalars().all()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Authorities: {len(authorities)}")
        print(f"With pincodes:  {sum(1 for a in authorities if a.pincodes)}")
        print(f"With polygon:   {sum(1 for a in authorities if a.polygon)}")
        print(f"With center:    {sum(1 for a in authorities if a.center_lat is not None)}")
        print(f"With endpoints: {sum(1 for a in authorities if a.endpoint_tokens)}")

        jurisdictions: dict[str, int] = {}
        for a in authorities:
            key = a.jurisdiction_code or "-"
            jurisdictions[key] = jurisdictions.get(key, 0) + 1
        print(f"Jurisdiction distribution: {jurisdictions}")
        print(f"{'='*50}\n")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Seed the authority database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default="data",
        help="Directory containing CSV files (default: data)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing authorities before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
