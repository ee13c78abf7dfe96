"""
SQLAlchemy models. Import here so Alembic and app can use them.
"""
from learnhub.models.topic import Topic
from learnhub.models.content import Content
from learnhub.models.collection import Collection, CollectionContent
from learnhub.models.filter_rule import CmsFilterConfig

__all__ = ["Topic", "Content", "Collection", "CollectionContent", "CmsFilterConfig"]
