"""
심각도 분류기
리콜 등급 또는 피드 키워드를 high / medium / low로 변환
"""

import re
from typing import Dict, List

from models import DEFAULT_PATHOGENS, Severity


class SeverityClassifier:
    """소스별 심각도 분류기"""

    DEFAULT_CLASS_SEVERITY = {
        "class i": Severity.HIGH,
        "class ii": Severity.MEDIUM,
    }

    def __init__(
        self,
        high_keywords: List[str] = None,
        class_severity: Dict[str, Severity] = None,
    ):
        """
        Args:
            high_keywords: 피드 항목을 high로 분류할 키워드
                (병원체 이름, "class i" 등)
            class_severity: 리콜 등급 → 심각도 매핑
        """
        self.high_keywords = [k.lower() for k in (high_keywords or self._default_keywords())]
        self.class_severity = {
            k.lower(): Severity(v) for k, v in (class_severity or self.DEFAULT_CLASS_SEVERITY).items()
        }

    def _default_keywords(self) -> List[str]:
        """기본 high 키워드"""
        return DEFAULT_PATHOGENS + ["class i"]

    def classify_record(self, classification: str) -> Severity:
        """리콜 등급 기반 심각도 (Class I → high, Class II → medium, 그 외 low)"""
        key = " ".join((classification or "").lower().split())
        return self.class_severity.get(key, Severity.LOW)

    def classify_feed_item(self, title: str, description: str = "") -> Severity:
        """피드 텍스트 기반 심각도 (키워드 포함 시 high, 그 외 medium)"""
        text = f"{title or ''} {description or ''}".lower()

        for keyword in self.high_keywords:
            if self._keyword_matches(keyword, text):
                return Severity.HIGH

        return Severity.MEDIUM

    def _keyword_matches(self, keyword: str, text: str) -> bool:
        """키워드가 텍스트에 매칭되는지 확인 (단어 경계 고려)"""
        # 특수문자가 포함된 키워드는 그대로 검색 (예: "e. coli")
        if "." in keyword or "-" in keyword:
            return keyword in text

        # "class i"가 "class ii"에 매칭되지 않도록
        pattern = rf"\b{re.escape(keyword)}\b"
        return bool(re.search(pattern, text))
