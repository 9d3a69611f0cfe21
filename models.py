"""
공통 데이터 모델 정의
"""

import hashlib
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union


SUPPORTED_WINDOWS = (7, 30, 90)

# 병원체 기본 어휘 (심각도 분류, 오염 신호 공용)
DEFAULT_PATHOGENS = ["listeria", "salmonella", "e. coli", "hepatitis", "norovirus"]


class Severity(str, Enum):
    """타임라인 심각도"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EventKind(str, Enum):
    """타임라인 이벤트 원천"""
    STRUCTURED_RECORD = "structured_record"
    FEED_ITEM = "feed_item"


class MatchType(str, Enum):
    """교차 참조 매칭 유형"""
    COMPANY = "company"
    RECALL_NUMBER = "recall_number"
    PRODUCT = "product"
    KEYWORD = "keyword"


def parse_date(value) -> Optional[datetime]:
    """날짜 파싱 (UTC aware datetime, 실패 시 None)"""
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None

        parsed = None
        # openFDA 형식: 20240110
        if len(text) == 8 and text.isdigit():
            try:
                parsed = datetime.strptime(text, "%Y%m%d")
            except ValueError:
                return None
        else:
            try:
                # 2024-01-01T00:00:00Z 형식
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                pass

        # RSS pubDate 형식: Wed, 10 Jan 2024 12:00:00 GMT
        if parsed is None:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError):
                return None
            if parsed is None:
                return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def time_window(days: int, now: datetime = None) -> Tuple[datetime, datetime]:
    """조회 기간 [start, end] 계산 (7/30/90일만 지원)"""
    if days not in SUPPORTED_WINDOWS:
        raise ValueError(f"지원하지 않는 기간: {days}일 (지원: {SUPPORTED_WINDOWS})")

    end = parse_date(now) if now is not None else datetime.now(timezone.utc)
    return end - timedelta(days=days), end


@dataclass
class StructuredRecord:
    """구조화된 리콜(enforcement) 레코드"""
    id: str                                  # 고유 ID (openfda:identifier)
    classification: str = ""                 # Class I | Class II | Class III
    initiation_date: Optional[datetime] = None
    source_endpoint: str = ""                # food/enforcement 등
    company_name: Optional[str] = None
    product_description: Optional[str] = None
    recall_number: Optional[str] = None
    reason_for_recall: Optional[str] = None
    raw_data: dict = field(default_factory=dict)  # 원본 데이터 (디버깅용)

    def __post_init__(self):
        # 직접 생성된 레코드도 날짜 형식 통일 (해석 불가 시 None)
        self.initiation_date = parse_date(self.initiation_date)

    @classmethod
    def from_openfda(cls, payload: dict, endpoint: str) -> "StructuredRecord":
        """openFDA enforcement 결과를 레코드로 변환"""
        recall_number = payload.get("recall_number") or None
        identifier = recall_number or payload.get("event_id")
        if not identifier:
            digest_source = f"{payload.get('recalling_firm', '')}|{payload.get('product_description', '')}"
            identifier = hashlib.md5(digest_source.encode()).hexdigest()[:12]

        return cls(
            id=f"openfda:{identifier}",
            classification=payload.get("classification", "") or "",
            initiation_date=payload.get("recall_initiation_date"),
            source_endpoint=endpoint,
            company_name=payload.get("recalling_firm") or payload.get("company_name") or None,
            product_description=payload.get("product_description") or None,
            recall_number=recall_number,
            reason_for_recall=payload.get("reason_for_recall") or None,
            raw_data=dict(payload),
        )


@dataclass
class FeedItem:
    """RSS 등 신디케이션 피드 항목"""
    title: str
    description: str
    publication_date: Optional[datetime]
    link: str
    source_name: str
    category: Optional[str] = None
    raw_data: dict = field(default_factory=dict)

    def __post_init__(self):
        self.publication_date = parse_date(self.publication_date)

    @property
    def id(self) -> str:
        """고유 ID (source:guid 해시, guid 없으면 링크+제목+발행일 해시)"""
        raw = self.raw_data or {}
        identifier = raw.get("id") or raw.get("guid")
        if not identifier:
            published = self.publication_date.isoformat() if self.publication_date else ""
            identifier = f"{self.link}|{self.title}|{published}"
        digest = hashlib.md5(str(identifier).encode()).hexdigest()[:12]
        return f"{self.source_name}:{digest}"

    @property
    def text(self) -> str:
        """제목 + 설명 (소문자)"""
        return f"{self.title} {self.description}".lower()


Payload = Union[StructuredRecord, FeedItem]


@dataclass
class TimelineEvent:
    """화면 표시용 통합 타임라인 이벤트"""
    id: str
    kind: EventKind
    timestamp: datetime
    title: str
    description: str
    severity: Severity
    source_label: str
    payload: Payload                         # kind에 따라 StructuredRecord 또는 FeedItem
    correlation_ids: FrozenSet[str] = frozenset()

    def with_correlations(self, correlation_ids) -> "TimelineEvent":
        """교차 참조 ID를 붙인 새 이벤트 반환"""
        return replace(self, correlation_ids=self.correlation_ids | frozenset(correlation_ids))


@dataclass
class CrossReference:
    """구조화 레코드 ↔ 피드 항목 교차 참조"""
    structured_record: StructuredRecord
    feed_item: FeedItem
    confidence_score: float                  # 0.0 ~ 1.0
    match_type: MatchType
    match_details: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"xref:{self.structured_record.id}|{self.feed_item.id}"


@dataclass
class CorrelationSummary:
    """교차 참조 요약 통계"""
    confirmed: int = 0
    pending_review: int = 0
    total: int = 0
    timeline_events: int = 0
    severity_distribution: Dict[str, int] = field(default_factory=dict)


@dataclass
class CorrelationReport:
    """파이프라인 최종 결과"""
    timeline: List[TimelineEvent]
    cross_references: List[CrossReference]
    summary: CorrelationSummary
