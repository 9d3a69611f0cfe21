"""
규제 기관 RSS 피드 수집기 (FDA, USDA FSIS, CDC 등)
"""

import logging
import re
from calendar import timegm
from datetime import datetime, timezone
from typing import List, Optional

import feedparser

from models import FeedItem, parse_date
from .base import BaseCollector

logger = logging.getLogger(__name__)


class RSSCollector(BaseCollector):
    """RSS 피드 수집기"""

    DEFAULT_FEEDS = [
        {
            "name": "FDA Recalls",
            "url": "https://www.fda.gov/about-fda/contact-fda/stay-informed/rss-feeds/recalls/rss.xml",
            "category": "Recalls",
        },
        {
            "name": "USDA FSIS",
            "url": "https://www.fsis.usda.gov/fsis-content/rss/recalls.xml",
            "category": "Food Safety",
        },
    ]

    def __init__(self, feeds: List[dict] = None):
        """
        Args:
            feeds: [{"name": ..., "url": ..., "category": ...}]
        """
        self.feeds = feeds or self.DEFAULT_FEEDS

    @property
    def source_name(self) -> str:
        return "rss"

    def fetch(self, start: datetime, end: datetime) -> List[FeedItem]:
        """모든 피드를 가져와 기간 내 FeedItem 리스트로 변환"""
        items = []
        for feed_config in self.feeds:
            items.extend(self._fetch_feed(feed_config, start, end))
        return items

    def _fetch_feed(self, feed_config: dict, start: datetime, end: datetime) -> List[FeedItem]:
        name = feed_config.get("name", feed_config.get("url", "unknown"))
        url = feed_config.get("url")
        if not url:
            logger.error(f"{name} 피드 URL 누락, 건너뜀")
            return []

        feed = feedparser.parse(url)

        if feed.bozo:
            logger.warning(f"{name} 피드 파싱 경고: {feed.get('bozo_exception')}")

        items = []
        for entry in feed.entries:
            try:
                item = self._parse_entry(entry, feed_config)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.error(f"{name} 항목 파싱 실패: {e}")
                continue

            # 날짜를 모르는 항목은 유지 (타임라인에서 제외 처리)
            if item.publication_date is not None and not (start <= item.publication_date <= end):
                continue
            items.append(item)

        logger.info(f"{name}에서 {len(items)}개 항목 수집")
        return items

    def _parse_entry(self, entry, feed_config: dict) -> FeedItem:
        """RSS 항목을 FeedItem으로 변환"""
        return FeedItem(
            title=self._clean_html(entry.get("title", "")),
            description=self._clean_html(entry.get("description", entry.get("summary", ""))),
            publication_date=self._parse_date(entry),
            link=entry.get("link", ""),
            source_name=feed_config.get("name", self.source_name),
            category=entry.get("category") or feed_config.get("category"),
            raw_data=dict(entry),
        )

    def _parse_date(self, entry) -> Optional[datetime]:
        """발행 시간 파싱 (없으면 None)"""
        if entry.get("published_parsed"):
            return datetime.fromtimestamp(timegm(entry["published_parsed"]), tz=timezone.utc)

        if entry.get("updated_parsed"):
            return datetime.fromtimestamp(timegm(entry["updated_parsed"]), tz=timezone.utc)

        return parse_date(entry.get("published", entry.get("pubDate")))

    def _clean_html(self, text: str) -> str:
        """HTML 태그 제거"""
        # HTML 태그 제거
        clean = re.sub(r"<[^>]+>", "", text or "")
        # 연속 공백 정리
        clean = re.sub(r"\s+", " ", clean).strip()
        return clean
