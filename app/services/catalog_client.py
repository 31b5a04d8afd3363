# app/services/catalog_client.py
from decimal import Decimal

import requests
from requests import RequestException

from app.domain.errors import CatalogUnavailable, TrackNotFound
from app.domain.types import TrackInfo
from app.utils.retry import http_retry
from app.utils.settings import CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """Read-only klient katalogu: cena i status aktywnosci utworu."""

    def __init__(self, base_url: str | None = None, timeout: float = CATALOG_TIMEOUT_SECONDS):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _fetch_track(self, track_id: int) -> dict | None:
        url = f"{self.base_url}/tracks/{track_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        #404 to odpowiedz, nie blad sieci, nie ponawiamy
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def lookup(self, track_id: int) -> TrackInfo:
        try:
            data = self._fetch_track(track_id)
        except RequestException as e:
            logger.error(f"Catalog lookup for track {track_id} failed: {e}")
            raise CatalogUnavailable() from e

        if data is None:
            raise TrackNotFound(track_id)

        return TrackInfo(
            id=track_id,
            price=Decimal(str(data["price"])),
            active=bool(data.get("active", True)),
        )
