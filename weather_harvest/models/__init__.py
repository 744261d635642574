"""Domain models for the weather harvest tool.

This package contains the immutable values passed between the resume resolver,
the fetch loop, the extractor and the dataset writer.
"""

from .config_models import DateColumnLocator, HarvestConfig, SourceConfig
from .day_record import DayRecord
from .harvest_result import HarvestResult
from .resume_point import MonthQuery, ResumeParams, ResumePoint

__all__ = [
    # Configuration models
    "DateColumnLocator",
    "HarvestConfig",
    "SourceConfig",
    # Run models
    "DayRecord",
    "HarvestResult",
    "MonthQuery",
    "ResumeParams",
    "ResumePoint",
]
