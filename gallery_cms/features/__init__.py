"""Repository features package"""

from gallery_cms.features.base_feature import RepositoryFeature
from gallery_cms.features.timestamp_feature import TimestampFeature

__all__ = ["RepositoryFeature", "TimestampFeature"]
