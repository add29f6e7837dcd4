"""
Remote collaborators: the RSS feed and the Reddit API.
"""

from .base import CommunityClient, FeedSource
from .feed import FeedClient, build_feed_url, parse_feed
from .reddit import RedditClient, build_reddit_client

__all__ = [
    "CommunityClient",
    "FeedClient",
    "FeedSource",
    "RedditClient",
    "build_feed_url",
    "build_reddit_client",
    "parse_feed",
]
