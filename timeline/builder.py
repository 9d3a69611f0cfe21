"""
통합 타임라인 생성기
리콜 레코드와 피드 항목을 하나의 시간순 이벤트 목록으로 병합
"""

import logging
from collections import defaultdict
from typing import Iterable, List, Optional

from models import (
    CrossReference,
    EventKind,
    FeedItem,
    StructuredRecord,
    TimelineEvent,
)
from .severity import SeverityClassifier

logger = logging.getLogger(__name__)

NO_REASON = "No reason specified"


def is_sorted_desc(events: List[TimelineEvent]) -> bool:
    """타임스탬프 내림차순 여부"""
    return all(a.timestamp >= b.timestamp for a, b in zip(events, events[1:]))


class TimelineBuilder:
    """타임라인 생성기"""

    def __init__(self, classifier: SeverityClassifier = None, title_length: int = 60):
        self.classifier = classifier or SeverityClassifier()
        self.title_length = title_length

    def from_record(self, record: StructuredRecord) -> Optional[TimelineEvent]:
        """리콜 레코드 → 이벤트 (날짜 없으면 None)"""
        if record.initiation_date is None:
            return None

        product = (record.product_description or "")[:self.title_length]
        identifier = record.recall_number or record.id

        return TimelineEvent(
            id=f"fda-{identifier}",
            kind=EventKind.STRUCTURED_RECORD,
            timestamp=record.initiation_date,
            title=f"{record.classification} Recall: {product}...",
            description=record.reason_for_recall or NO_REASON,
            severity=self.classifier.classify_record(record.classification),
            source_label=f"FDA {record.source_endpoint}",
            payload=record,
        )

    def from_feed_item(self, item: FeedItem) -> Optional[TimelineEvent]:
        """피드 항목 → 이벤트 (날짜 없으면 None)"""
        if item.publication_date is None:
            return None

        return TimelineEvent(
            id=f"rss-{item.id}",
            kind=EventKind.FEED_ITEM,
            timestamp=item.publication_date,
            title=item.title,
            description=item.description,
            severity=self.classifier.classify_feed_item(item.title, item.description),
            source_label=item.source_name,
            payload=item,
        )

    def build(
        self,
        records: Iterable[StructuredRecord],
        feed_items: Iterable[FeedItem],
    ) -> List[TimelineEvent]:
        """
        전체 이벤트를 최신순으로 정렬하여 반환

        날짜를 해석할 수 없는 항목은 경고 후 제외한다.
        같은 시각의 이벤트는 id 오름차순.
        """
        if records is None or feed_items is None:
            raise TypeError("records와 feed_items는 None일 수 없습니다")

        events = []

        for record in records:
            event = self.from_record(record)
            if event is None:
                logger.warning(f"날짜 없는 리콜 레코드 제외: {record.id}")
                continue
            events.append(event)

        for item in feed_items:
            event = self.from_feed_item(item)
            if event is None:
                logger.warning(f"날짜 없는 피드 항목 제외: {item.title[:50]}")
                continue
            events.append(event)

        # id 오름차순으로 먼저 정렬한 뒤 시간 내림차순 (안정 정렬)
        events.sort(key=lambda e: e.id)
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events

    def attach_correlations(
        self,
        events: List[TimelineEvent],
        cross_references: Iterable[CrossReference],
    ) -> List[TimelineEvent]:
        """교차 참조 ID를 해당 이벤트에 연결한 새 목록 반환"""
        by_payload = defaultdict(set)
        for ref in cross_references:
            by_payload[("record", ref.structured_record.id)].add(ref.id)
            by_payload[("feed", ref.feed_item.id)].add(ref.id)

        linked = []
        for event in events:
            if event.kind == EventKind.STRUCTURED_RECORD:
                key = ("record", event.payload.id)
            else:
                key = ("feed", event.payload.id)

            ids = by_payload.get(key)
            linked.append(event.with_correlations(ids) if ids else event)

        return linked
