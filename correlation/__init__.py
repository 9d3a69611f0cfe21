from .signals import SignalConfig, SignalHit
from .matcher import CrossReferenceMatcher, MatchResult
from .ranking import rank, summarize, is_confirmed, is_pending_review
from .pipeline import CorrelationPipeline

__all__ = [
    "SignalConfig",
    "SignalHit",
    "CrossReferenceMatcher",
    "MatchResult",
    "rank",
    "summarize",
    "is_confirmed",
    "is_pending_review",
    "CorrelationPipeline",
]
