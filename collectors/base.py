"""
수집기 베이스 클래스
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List


class BaseCollector(ABC):
    """수집기 추상 베이스 클래스"""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """소스 이름 (openfda, rss)"""
        pass

    @abstractmethod
    def fetch(self, start: datetime, end: datetime) -> List:
        """기간 [start, end]의 항목을 가져와 모델 리스트로 변환"""
        pass
