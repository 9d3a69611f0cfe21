"""
교차 참조 파이프라인
타임라인 생성 + 매칭 + 정렬 + 요약을 통합
"""

import logging
from typing import Sequence

from models import CorrelationReport, FeedItem, StructuredRecord
from timeline import SeverityClassifier, TimelineBuilder
from .matcher import CrossReferenceMatcher
from .ranking import rank, summarize

logger = logging.getLogger(__name__)


class CorrelationPipeline:
    """교차 참조 파이프라인"""

    def __init__(
        self,
        builder: TimelineBuilder = None,
        matcher: CrossReferenceMatcher = None,
    ):
        self.builder = builder or TimelineBuilder()
        self.matcher = matcher or CrossReferenceMatcher()

    @classmethod
    def from_config(cls, config: dict = None) -> "CorrelationPipeline":
        """config.yaml 전체 설정에서 생성"""
        config = config or {}
        severity_config = config.get("severity", {})
        timeline_config = config.get("timeline", {})

        classifier = SeverityClassifier(
            high_keywords=severity_config.get("high_keywords"),
        )
        builder = TimelineBuilder(
            classifier=classifier,
            title_length=timeline_config.get("title_length", 60),
        )
        matcher = CrossReferenceMatcher.from_config(config.get("correlation", {}))
        return cls(builder, matcher)

    def run(
        self,
        records: Sequence[StructuredRecord],
        feed_items: Sequence[FeedItem],
    ) -> CorrelationReport:
        """전체 처리 후 결과 반환"""
        timeline = self.builder.build(records, feed_items)
        logger.debug(f"타임라인 이벤트: {len(timeline)}개")

        cross_references = rank(self.matcher.match(records, feed_items))
        logger.debug(f"교차 참조: {len(cross_references)}개")

        timeline = self.builder.attach_correlations(timeline, cross_references)

        return CorrelationReport(
            timeline=timeline,
            cross_references=cross_references,
            summary=summarize(cross_references, timeline),
        )
