"""Reporting routes over archived orders."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query, Request

from restopos.api.deps import Repo
from restopos.core.rate_limit import limiter
from restopos.schemas.reports import ArchiveSummary
from restopos.services.reports_service import archive_summary

router = APIRouter()


@router.get("/archive-summary", response_model=ArchiveSummary)
@limiter.limit("30/minute")
def get_archive_summary(
    request: Request,
    repo: Repo,
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """Sales figures for one month of the archive (defaults to the current month)."""
    now = datetime.now(timezone.utc)
    return archive_summary(repo.get_archived_orders(), year or now.year, month or now.month)
