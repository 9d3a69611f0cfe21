"""
교차 참조 매처
모든 (리콜 레코드 × 피드 항목) 쌍에 신호 함수를 적용하고 신뢰도 점수 계산
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Sequence

from models import CrossReference, FeedItem, MatchType, StructuredRecord
from .signals import DEFAULT_SIGNALS, SignalConfig, SignalFunction

logger = logging.getLogger(__name__)

MATCH_TYPE_POLICIES = ("strongest", "last")


@dataclass
class MatchResult:
    """쌍 하나의 점수 계산 결과"""
    score: float
    match_type: MatchType
    details: List[str] = field(default_factory=list)
    raw_score: float = 0.0                   # clamp 전 합계


class CrossReferenceMatcher:
    """교차 참조 매처"""

    def __init__(
        self,
        config: SignalConfig = None,
        threshold: float = 0.3,
        max_workers: int = 1,
        match_type_policy: str = "strongest",
        signals: Sequence[SignalFunction] = None,
    ):
        """
        Args:
            config: 신호 가중치/어휘 설정
            threshold: 이 점수를 초과해야 교차 참조 생성
            max_workers: 2 이상이면 레코드 단위로 스레드 풀 분산
            match_type_policy: "strongest" (가중치 최대 신호) 또는 "last" (마지막 신호)
            signals: 평가 순서대로 나열한 신호 함수
        """
        if match_type_policy not in MATCH_TYPE_POLICIES:
            raise ValueError(f"알 수 없는 match_type_policy: {match_type_policy}")

        self.config = config or SignalConfig()
        self.threshold = threshold
        self.max_workers = max(1, int(max_workers or 1))
        self.match_type_policy = match_type_policy
        self.signals = list(signals or DEFAULT_SIGNALS)

    @classmethod
    def from_config(cls, config: dict = None) -> "CrossReferenceMatcher":
        """config.yaml의 correlation 섹션에서 생성"""
        config = config or {}
        return cls(
            config=SignalConfig.from_dict(config),
            threshold=config.get("threshold", 0.3),
            max_workers=config.get("max_workers", 1),
            match_type_policy=config.get("match_type_policy", "strongest"),
        )

    def score_pair(self, record: StructuredRecord, item: FeedItem) -> MatchResult:
        """한 쌍에 모든 신호를 적용"""
        score = 0.0
        details = []
        match_type = MatchType.KEYWORD
        best_weight = 0.0

        for signal in self.signals:
            for hit in signal(record, item, self.config):
                score += hit.weight
                details.append(hit.explanation)

                if hit.match_type is None:
                    continue
                if self.match_type_policy == "last" or hit.weight > best_weight:
                    match_type = hit.match_type
                    best_weight = hit.weight

        return MatchResult(
            score=min(score, 1.0),
            match_type=match_type,
            details=details,
            raw_score=score,
        )

    def match_record(self, record: StructuredRecord, items: Sequence[FeedItem]) -> List[CrossReference]:
        """레코드 하나를 전체 피드 항목과 비교"""
        matches = []
        for item in items:
            result = self.score_pair(record, item)
            if result.raw_score <= self.threshold:
                continue

            logger.debug(f"매칭 [{result.score:.2f}] {record.id} ↔ {item.title[:50]}")
            matches.append(CrossReference(
                structured_record=record,
                feed_item=item,
                confidence_score=result.score,
                match_type=result.match_type,
                match_details=result.details,
            ))
        return matches

    def match(
        self,
        records: Sequence[StructuredRecord],
        items: Sequence[FeedItem],
    ) -> List[CrossReference]:
        """
        전체 쌍 비교 후 임계값을 넘는 교차 참조 반환

        Returns:
            레코드 입력 순서 → 피드 입력 순서의 교차 참조 목록 (정렬 전)
        """
        if records is None or items is None:
            raise TypeError("records와 items는 None일 수 없습니다")

        records = list(records)
        items = list(items)
        if not records or not items:
            return []

        if self.max_workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                per_record = list(executor.map(lambda r: self.match_record(r, items), records))
        else:
            per_record = [self.match_record(record, items) for record in records]

        return [ref for refs in per_record for ref in refs]
