"""
Content Report API Routes
Content owners and admins review reports raised against content
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from braincache.api.dependencies import get_current_user, parse_uuid
from braincache.core.exceptions import AuthorizationException, NotFoundException
from braincache.core.logging import get_logger
from braincache.db.models import Content, ContentReport, ReportStatus
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.report import ReportListResponse, ReportResponse, ReportStatusUpdate

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=ReportListResponse)
async def list_reports(
    status: Optional[ReportStatus] = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    List reports, newest first

    Admins see every report; everyone else sees reports on their own content.
    """
    reporter = aliased(UserModel)
    query = (
        select(ContentReport, Content, reporter)
        .join(Content, Content.id == ContentReport.content_id)
        .outerjoin(reporter, reporter.id == ContentReport.reporter_id)
        .order_by(ContentReport.created_at.desc())
    )
    if not current_user.is_admin:
        query = query.where(Content.owner_id == current_user.id)
    if status is not None:
        query = query.where(ContentReport.status == status.value)

    result = await db.execute(query)
    return ReportListResponse(
        reports=[
            ReportResponse.from_report(report, content, user)
            for report, content, user in result.all()
        ]
    )


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report_status(
    report_id: str,
    request: ReportStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Resolve or ignore a report (content owner or admin)"""
    report = await db.get(ContentReport, parse_uuid(report_id, "report_id"))
    if report is None:
        raise NotFoundException("Report")

    content = await db.get(Content, report.content_id)
    if not current_user.is_admin and (content is None or content.owner_id != current_user.id):
        raise AuthorizationException()

    report.status = request.status.value
    await db.commit()

    logger.info(
        f"Report {report.id} marked {report.status} by {current_user.email}"
    )
    reporter = await db.get(UserModel, report.reporter_id)
    return ReportResponse.from_report(report, content, reporter)
