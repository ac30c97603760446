from .newsapi import NewsApiFeed

from .base import BaseFeed

__all__ = ["NewsApiFeed", "BaseFeed"]
