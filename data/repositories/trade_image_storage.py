"""Supabase Storage access for trade screenshots."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import unquote, urlparse

from config.constants import DEFAULT_IMAGE_BUCKET

logger = logging.getLogger(__name__)


class TradeImageStorage:
    """Removes stored screenshot images referenced by trades.

    References are either public object URLs
    (``.../storage/v1/object/public/<bucket>/<path>``) or bucket-relative paths.
    Deletion is best-effort: failures are logged and reported, never raised,
    so a missing image never blocks deleting its trade.
    """

    def __init__(self, client: Any, bucket: str = DEFAULT_IMAGE_BUCKET):
        self.client = client
        self.bucket = bucket

    def object_path(self, reference: str) -> Optional[str]:
        """Bucket-relative object path for a screenshot reference."""
        if not reference:
            return None

        parsed = urlparse(reference)
        path = unquote(parsed.path) if parsed.scheme else reference

        marker = f"/{self.bucket}/"
        if marker in path:
            path = path.split(marker, 1)[1]
        elif parsed.scheme:
            logger.warning(f"Screenshot URL is not in bucket '{self.bucket}': {reference}")
            return None

        return path.lstrip('/') or None

    def delete_trade_image(self, reference: str) -> bool:
        """Delete one stored screenshot.

        Returns:
            True if the storage call succeeded, False otherwise
        """
        path = self.object_path(reference)
        if not path:
            return False

        try:
            self.client.storage.from_(self.bucket).remove([path])
            logger.info(f"Deleted trade image {path} from bucket {self.bucket}")
            return True
        except Exception as e:
            logger.warning(f"Failed to delete trade image {path}: {e}")
            return False
