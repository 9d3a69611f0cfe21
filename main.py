#!/usr/bin/env python3
"""
Recall Feed Correlator
openFDA 리콜 레코드와 규제 기관 RSS 피드를 수집하여
통합 타임라인과 교차 참조(신뢰도 점수)를 생성
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

import yaml

from collectors import OpenFDACollector, RSSCollector
from correlation import CorrelationPipeline
from models import (
    SUPPORTED_WINDOWS,
    CorrelationReport,
    FeedItem,
    StructuredRecord,
    time_window,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """로깅 설정"""
    logging.basicConfig(
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        level=logging.DEBUG if verbose else logging.INFO,
    )


def load_config(config_path: str = None) -> dict:
    """설정 파일 로드"""
    if config_path is None:
        config_path = Path(__file__).parent / "config.yaml"

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def collect_sources(
    config: dict,
    start: datetime,
    end: datetime,
) -> Tuple[List[StructuredRecord], List[FeedItem]]:
    """모든 소스에서 레코드/피드 수집"""
    records = []
    feed_items = []

    feed_config = config.get("feeds", {})

    # openFDA enforcement
    openfda_config = feed_config.get("openfda", {})
    if openfda_config.get("enabled", True):
        collector = OpenFDACollector(
            endpoints=openfda_config.get("endpoints"),
            limit=openfda_config.get("limit", 100),
            base_url=openfda_config.get("base_url"),
        )
        records.extend(collector.fetch(start, end))

    # RSS
    rss_config = feed_config.get("rss", {})
    if rss_config.get("enabled", True):
        collector = RSSCollector(rss_config.get("sources"))
        feed_items.extend(collector.fetch(start, end))

    return records, feed_items


def run_pipeline(
    config: dict,
    days: int = None,
    verbose: bool = False,
    workers: int = None,
) -> CorrelationReport:
    """메인 파이프라인 실행"""
    days = days or config.get("window_days", 7)
    start, end = time_window(days)

    # 1. 수집
    logger.info("=" * 50)
    logger.info(f"[1/3] 데이터 수집 중... ({start:%Y-%m-%d} ~ {end:%Y-%m-%d}, {days}일)")
    records, feed_items = collect_sources(config, start, end)
    logger.info(f"      리콜 레코드: {len(records)}개, 피드 항목: {len(feed_items)}개")

    # 2. 타임라인 + 교차 참조
    logger.info("[2/3] 타임라인 및 교차 참조 생성 중...")
    if workers:
        config = {**config, "correlation": {**config.get("correlation", {}), "max_workers": workers}}
    pipeline = CorrelationPipeline.from_config(config)
    report = pipeline.run(records, feed_items)

    if verbose:
        for ref in report.cross_references:
            logger.info(
                f"        - [{ref.confidence_score:.0%}] {ref.match_type.value}: "
                f"{ref.structured_record.recall_number or ref.structured_record.id} ↔ {ref.feed_item.title[:50]}"
            )

    # 3. 요약
    summary = report.summary
    logger.info("[3/3] 요약")
    logger.info(f"      확정: {summary.confirmed}건 / 검토 대기: {summary.pending_review}건 / 전체: {summary.total}건")
    logger.info(f"      타임라인 이벤트: {summary.timeline_events}개 {summary.severity_distribution}")
    logger.info("=" * 50)

    return report


def report_to_dict(report: CorrelationReport) -> dict:
    """JSON 출력용 변환"""
    return {
        "summary": asdict(report.summary),
        "timeline": [
            {
                "id": event.id,
                "kind": event.kind.value,
                "timestamp": event.timestamp.isoformat(),
                "title": event.title,
                "description": event.description,
                "severity": event.severity.value,
                "source": event.source_label,
                "correlation_ids": sorted(event.correlation_ids),
            }
            for event in report.timeline
        ],
        "cross_references": [
            {
                "id": ref.id,
                "recall_number": ref.structured_record.recall_number,
                "company_name": ref.structured_record.company_name,
                "feed_title": ref.feed_item.title,
                "feed_link": ref.feed_item.link,
                "confidence_score": round(ref.confidence_score, 4),
                "match_type": ref.match_type.value,
                "match_details": ref.match_details,
            }
            for ref in report.cross_references
        ],
    }


def main(argv: List[str] = None):
    parser = argparse.ArgumentParser(description="Recall Feed Correlator")
    parser.add_argument("--config", "-c", help="설정 파일 경로")
    parser.add_argument("--days", "-d", type=int, choices=SUPPORTED_WINDOWS, help="조회 기간 (일)")
    parser.add_argument("--workers", "-w", type=int, help="매칭 스레드 수")
    parser.add_argument("--json", action="store_true", help="결과를 JSON으로 출력")
    parser.add_argument("--verbose", "-v", action="store_true", help="상세 출력")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    config = load_config(args.config)

    report = run_pipeline(config, args.days, args.verbose, args.workers)

    if args.json:
        json.dump(report_to_dict(report), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")


if __name__ == "__main__":
    main()
