"""
교차 참조 신호 함수
리콜 레코드와 피드 항목 한 쌍을 검사하여 부분 점수와 설명을 반환
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Dict, List, Optional

from models import DEFAULT_PATHOGENS, FeedItem, MatchType, StructuredRecord


@dataclass
class SignalHit:
    """신호 1건의 기여"""
    weight: float
    explanation: str
    match_type: Optional[MatchType] = None   # None이면 매칭 유형에 영향 없음


@dataclass
class SignalConfig:
    """신호 가중치 및 어휘 설정"""

    DEFAULT_WEIGHTS = {
        "company": 0.8,          # 회사명 일치
        "recall_number": 0.9,    # 리콜 번호 일치
        "product_keyword": 0.2,  # 제품 키워드 (토큰당)
        "contamination": 0.6,    # 병원체 동시 출현
        "temporal": 0.3,         # 3일 이내
    }

    weights: Dict[str, float] = field(default_factory=lambda: dict(SignalConfig.DEFAULT_WEIGHTS))
    pathogens: List[str] = field(default_factory=lambda: list(DEFAULT_PATHOGENS))
    min_token_length: int = 4
    proximity_days: float = 3

    @classmethod
    def from_dict(cls, config: dict = None) -> "SignalConfig":
        """config.yaml의 correlation 섹션에서 생성"""
        config = config or {}
        weights = dict(cls.DEFAULT_WEIGHTS)
        weights.update(config.get("weights") or {})

        return cls(
            weights=weights,
            pathogens=[p.lower() for p in (config.get("pathogens") or DEFAULT_PATHOGENS)],
            min_token_length=config.get("min_token_length", 4),
            proximity_days=config.get("proximity_days", 3),
        )


def company_signal(record: StructuredRecord, item: FeedItem, config: SignalConfig) -> List[SignalHit]:
    """회사명이 피드 제목에 포함 (대소문자 무시)"""
    company = record.company_name
    if not company or company.lower() not in (item.title or "").lower():
        return []

    return [SignalHit(config.weights["company"], f"Company match: {company}", MatchType.COMPANY)]


def recall_number_signal(record: StructuredRecord, item: FeedItem, config: SignalConfig) -> List[SignalHit]:
    """리콜 번호가 피드 제목/설명에 포함"""
    number = record.recall_number
    if not number:
        return []

    if number in (item.title or "") or number in (item.description or ""):
        return [SignalHit(
            config.weights["recall_number"],
            f"Recall number match: {number}",
            MatchType.RECALL_NUMBER,
        )]
    return []


def product_keyword_signal(record: StructuredRecord, item: FeedItem, config: SignalConfig) -> List[SignalHit]:
    """제품 설명의 긴 토큰마다 피드 텍스트 포함 여부 검사 (토큰마다 점수)"""
    if not record.product_description:
        return []

    title = (item.title or "").lower()
    description = (item.description or "").lower()

    hits = []
    for token in record.product_description.lower().split():
        if len(token) > config.min_token_length and (token in title or token in description):
            hits.append(SignalHit(
                config.weights["product_keyword"],
                f"Product keyword: {token}",
                MatchType.PRODUCT,
            ))
    return hits


def contamination_signal(record: StructuredRecord, item: FeedItem, config: SignalConfig) -> List[SignalHit]:
    """리콜 사유와 피드 텍스트에 같은 병원체가 등장"""
    reason = (record.reason_for_recall or "").lower()
    if not reason:
        return []

    text = item.text
    return [
        SignalHit(config.weights["contamination"], f"Contamination match: {pathogen}")
        for pathogen in config.pathogens
        if pathogen in reason and pathogen in text
    ]


def temporal_signal(record: StructuredRecord, item: FeedItem, config: SignalConfig) -> List[SignalHit]:
    """리콜 개시일과 피드 발행일이 N일 이내"""
    if record.initiation_date is None or item.publication_date is None:
        return []

    elapsed = abs(record.initiation_date - item.publication_date)
    if elapsed > timedelta(days=config.proximity_days):
        return []

    days = elapsed / timedelta(days=1)
    return [SignalHit(config.weights["temporal"], f"Timeline correlation: {round(days)} days apart")]


SignalFunction = Callable[[StructuredRecord, FeedItem, SignalConfig], List[SignalHit]]

# 평가 순서 고정: company → recall_number → product → contamination → temporal
DEFAULT_SIGNALS: List[SignalFunction] = [
    company_signal,
    recall_number_signal,
    product_keyword_signal,
    contamination_signal,
    temporal_signal,
]
