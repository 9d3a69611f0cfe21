"""
openFDA enforcement(리콜) API 수집기
"""

import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import requests

from models import StructuredRecord
from .base import BaseCollector

logger = logging.getLogger(__name__)


class OpenFDACollector(BaseCollector):
    """openFDA food/drug/device enforcement 수집기"""

    API_URL = "https://api.fda.gov"

    DEFAULT_ENDPOINTS = ["food/enforcement", "drug/enforcement", "device/enforcement"]

    def __init__(
        self,
        endpoints: List[str] = None,
        limit: int = 100,
        api_key: str = None,
        base_url: str = None,
    ):
        self.endpoints = endpoints or self.DEFAULT_ENDPOINTS
        self.limit = limit
        self.api_key = api_key or os.environ.get("OPENFDA_API_KEY")
        self.base_url = (base_url or self.API_URL).rstrip("/")

    @property
    def source_name(self) -> str:
        return "openfda"

    def fetch(self, start: datetime, end: datetime) -> List[StructuredRecord]:
        """전체 엔드포인트 결과를 엔드포인트 순서대로 평탄화"""
        grouped = self.fetch_grouped(start, end)
        return [record for endpoint in self.endpoints for record in grouped.get(endpoint, [])]

    def fetch_grouped(self, start: datetime, end: datetime) -> Dict[str, List[StructuredRecord]]:
        """엔드포인트별 레코드 (실패한 엔드포인트는 빈 리스트)"""
        grouped = {}
        for endpoint in self.endpoints:
            try:
                data = self._query_api(endpoint, start, end)
            except requests.RequestException as e:
                logger.error(f"openFDA {endpoint} 호출 실패: {e}")
                data = None

            results = (data or {}).get("results", [])

            records = []
            for payload in results:
                try:
                    records.append(StructuredRecord.from_openfda(payload, endpoint))
                except (AttributeError, TypeError, ValueError) as e:
                    logger.error(f"openFDA 레코드 파싱 실패: {e}")
                    continue

            grouped[endpoint] = records
            logger.info(f"openFDA {endpoint}에서 {len(records)}개 레코드 수집")

        return grouped

    def _build_query(self, start: datetime, end: datetime) -> str:
        """recall_initiation_date 범위 검색식"""
        return f"recall_initiation_date:[{start:%Y%m%d} TO {end:%Y%m%d}]"

    def _query_api(self, endpoint: str, start: datetime, end: datetime) -> Optional[dict]:
        """REST API 호출"""
        params = {
            "search": self._build_query(start, end),
            "limit": self.limit,
        }
        if self.api_key:
            params["api_key"] = self.api_key

        response = requests.get(
            f"{self.base_url}/{endpoint}.json",
            params=params,
            timeout=30,
        )

        # 검색 결과가 없으면 openFDA는 404를 반환
        if response.status_code == 404:
            return None

        if response.status_code != 200:
            logger.error(f"openFDA API 응답 오류: {endpoint} {response.status_code}")
            return None

        return response.json()
