from .base import BaseCollector
from .openfda_collector import OpenFDACollector
from .rss_collector import RSSCollector

__all__ = ["BaseCollector", "OpenFDACollector", "RSSCollector"]
