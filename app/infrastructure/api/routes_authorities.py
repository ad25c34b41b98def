"""Authority endpoints — listing, detail and CSV ingest."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from app.adapters.persistence.repositories import SqlAuthorityRepository
from app.config import settings
from app.domain.entities.authority import Authority
from app.infrastructure.api.dependencies import get_authority_repo
from app.tools.seed_db import seed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/authorities", tags=["authorities"])


@router.get("")
async def list_authorities(repo: SqlAuthorityRepository = Depends(get_authority_repo)):
    authorities = await repo.get_all()
    return {
        "total": len(authorities),
        "authorities": [_serialize_authority(a) for a in authorities],
    }


@router.post("/ingest")
async def ingest_csv(drop: bool = False):
    """Load the authorities CSV from the configured data directory."""
    data_dir = Path(settings.csv_data_path)
    if not data_dir.exists():
        raise HTTPException(status_code=400, detail=f"Data directory not found: {data_dir}")

    try:
        counts = await seed(data_dir, drop=drop)
    except FileNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error ingesting CSV data")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "status": "ok",
        "message": "Authorities ingested successfully",
        "counts": counts,
        "drop": drop,
    }


@router.get("/{authority_id}")
async def get_authority(
    authority_id: str, repo: SqlAuthorityRepository = Depends(get_authority_repo)
):
    authority = await repo.get_by_id(authority_id)
    if not authority:
        raise HTTPException(status_code=404, detail="Authority not found")
    return _serialize_authority(authority)


def _serialize_authority(a: Authority) -> dict:
    # Endpoint tokens are device credentials; only their count is exposed.
    return {
        "id": a.id,
        "name": a.name,
        "pincodes": sorted(a.pincodes),
        "has_polygon": a.polygon is not None,
        "center_lat": a.center.latitude if a.center else None,
        "center_lon": a.center.longitude if a.center else None,
        "jurisdiction_code": a.jurisdiction_code,
        "endpoint_count": len(a.endpoint_tokens),
    }
