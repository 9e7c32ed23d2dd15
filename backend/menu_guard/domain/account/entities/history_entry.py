"""HistoryEntry entity - a persisted menu analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem


class AnalysisStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisType(str, Enum):
    MENU_ANALYSIS = "menu_analysis"


@dataclass(frozen=True)
class HistoryEntry:
    """
    Entity: One row of a user's analysis history.

    Created on successful analysis, deleted explicitly by the owner,
    never mutated otherwise.
    """

    id: int
    user_id: str
    created_at: datetime
    input_text: str
    result: List[AnalysisResultItem]
    allergies: str
    preferences: str
    status: AnalysisStatus = AnalysisStatus.COMPLETED
    analysis_type: AnalysisType = AnalysisType.MENU_ANALYSIS

    def is_in_month_of(self, moment: datetime) -> bool:
        """True if created in the same calendar month and year as `moment`."""
        return (
            self.created_at.year == moment.year and self.created_at.month == moment.month
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "analysis_type": self.analysis_type.value,
            "input_text": self.input_text,
            "result": [item.to_dict() for item in self.result],
            "allergies": self.allergies,
            "preferences": self.preferences,
        }


@dataclass(frozen=True)
class NewHistoryEntry:
    """Insert payload; the store assigns `id` and `created_at`."""

    user_id: str
    input_text: str
    result: List[AnalysisResultItem]
    allergies: str
    preferences: str
    status: AnalysisStatus = AnalysisStatus.COMPLETED
    analysis_type: AnalysisType = AnalysisType.MENU_ANALYSIS
    created_at: Optional[datetime] = field(default=None)
