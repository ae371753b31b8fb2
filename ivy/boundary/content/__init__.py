"""
Content store boundary layer.
"""

from ivy.boundary.content.layout import slug_for, strip_front_matter
from ivy.boundary.content.local_source import LocalContentSource
from ivy.boundary.content.s3_source import S3ContentSource

__all__ = ["LocalContentSource", "S3ContentSource", "slug_for", "strip_front_matter"]
