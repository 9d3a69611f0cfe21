from .severity import SeverityClassifier
from .builder import TimelineBuilder, is_sorted_desc

__all__ = ["SeverityClassifier", "TimelineBuilder", "is_sorted_desc"]
