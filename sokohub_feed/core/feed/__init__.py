"""
Feed generation core module.
"""

from .models import FeedItem, FeedConfig, Product
from .service import FeedService, FeedUnavailableError, generate_feed
from .state import CachedFeed, FeedStateStore, InMemoryFeedStateStore, RedisFeedStateStore
from .xml_writer import write_feed_xml, write_error_xml

__all__ = [
    'FeedItem',
    'FeedConfig',
    'Product',
    'FeedService',
    'FeedUnavailableError',
    'generate_feed',
    'CachedFeed',
    'FeedStateStore',
    'InMemoryFeedStateStore',
    'RedisFeedStateStore',
    'write_feed_xml',
    'write_error_xml',
]
