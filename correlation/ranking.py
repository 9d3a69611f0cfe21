"""
교차 참조 정렬 및 요약 통계
"""

from typing import Iterable, List

from models import CorrelationSummary, CrossReference, Severity, TimelineEvent

CONFIRMED_THRESHOLD = 0.7
PENDING_RANGE = (0.5, 0.7)


def rank(cross_references: Iterable[CrossReference]) -> List[CrossReference]:
    """신뢰도 내림차순 (안정 정렬)"""
    return sorted(cross_references, key=lambda ref: ref.confidence_score, reverse=True)


def is_confirmed(ref: CrossReference) -> bool:
    """확정: 0.7 초과"""
    return ref.confidence_score > CONFIRMED_THRESHOLD


def is_pending_review(ref: CrossReference) -> bool:
    """검토 대기: 0.5 이상 0.7 이하 (양끝 포함)"""
    low, high = PENDING_RANGE
    return low <= ref.confidence_score <= high


def count_confirmed(cross_references: Iterable[CrossReference]) -> int:
    return sum(1 for ref in cross_references if is_confirmed(ref))


def count_pending_review(cross_references: Iterable[CrossReference]) -> int:
    return sum(1 for ref in cross_references if is_pending_review(ref))


def summarize(
    cross_references: List[CrossReference],
    timeline: List[TimelineEvent] = None,
) -> CorrelationSummary:
    """교차 참조/타임라인 요약 통계"""
    timeline = timeline or []

    severity_counts = {severity.value: 0 for severity in Severity}
    for event in timeline:
        severity_counts[event.severity.value] += 1

    return CorrelationSummary(
        confirmed=count_confirmed(cross_references),
        pending_review=count_pending_review(cross_references),
        total=len(cross_references),
        timeline_events=len(timeline),
        severity_distribution=severity_counts,
    )
