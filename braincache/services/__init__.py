"""
Domain services: grant store, share links and spaces
"""

from braincache.services.grants import GrantStore
from braincache.services.share_links import ShareLinkResolver, ShareScope

__all__ = [
    "GrantStore",
    "ShareLinkResolver",
    "ShareScope",
]
