"""
Content Report Pydantic Models
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from braincache.db.models import ReportStatus
from braincache.models.common import UserSummary


class ReportCreate(BaseModel):
    """Report a content item"""
    model_config = ConfigDict(str_strip_whitespace=True)

    reason: str = Field(..., min_length=1, max_length=500)


class ReportStatusUpdate(BaseModel):
    """Move a report to a new status"""
    status: ReportStatus


class ReportResponse(BaseModel):
    """Report with the reported item and reporter info"""
    report_id: str
    content_id: str
    content_title: str
    content_type: Optional[str] = None
    reason: str
    status: str
    reported_by: Optional[UserSummary] = None
    created_at: str

    @classmethod
    def from_report(cls, report, content, reporter) -> "ReportResponse":
        return cls(
            report_id=str(report.id),
            content_id=str(report.content_id),
            content_title=content.title,
            content_type=content.type,
            reason=report.reason,
            status=report.status,
            reported_by=UserSummary.from_user_model(reporter) if reporter else None,
            created_at=report.created_at.isoformat() if report.created_at else "",
        )


class ReportListResponse(BaseModel):
    reports: List[ReportResponse]
