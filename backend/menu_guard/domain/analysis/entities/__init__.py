"""Analysis domain entities."""

from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    SafetyLevel,
    data_error_item,
    decode_result,
    is_analysis_result_list,
)

__all__ = [
    "AnalysisResultItem",
    "SafetyLevel",
    "data_error_item",
    "decode_result",
    "is_analysis_result_list",
]
