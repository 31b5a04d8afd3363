# app/services/access_service.py
from sqlalchemy.orm import Session

from app.domain.errors import OwnershipRequired, TrackUnavailable
from app.domain.types import StreamKind, StreamTarget
from app.repos.entitlement_repo import EntitlementRepo
from app.services.catalog_client import CatalogClient
from app.services.stats_service import PlayCounter
from app.utils.logging import get_logger

logger = get_logger(__name__)


class AccessService:
    """
    Bramka dostepu do tresci: preview vs pelny stream.

    Odczyty uprawnien moga isc z repliki. Opozniona replika daje co najwyzej
    falszywe "nie posiada", co konczy sie preview, nigdy falszywym dostepem.
    """

    def __init__(self, read_db: Session, catalog: CatalogClient, play_counter: PlayCounter):
        self.entitlements = EntitlementRepo(read_db)
        self.catalog = catalog
        self.play_counter = play_counter

    def check_ownership(self, user_id: int, track_id: int) -> bool:
        return self.entitlements.owns(user_id, track_id)

    def _require_active(self, track_id: int):
        track = self.catalog.lookup(track_id)
        if not track.active:
            raise TrackUnavailable(track_id)
        return track

    def preview(self, track_id: int) -> StreamTarget:
        self._require_active(track_id)
        self.play_counter.record_play(track_id)
        return StreamTarget(track_id=track_id, kind=StreamKind.PREVIEW)

    def full_stream(self, user_id: int, track_id: int) -> StreamTarget:
        self._require_active(track_id)
        if not self.check_ownership(user_id, track_id):
            raise OwnershipRequired(track_id)
        return StreamTarget(track_id=track_id, kind=StreamKind.FULL)

    def resolve_stream_target(self, user_id: int, track_id: int) -> StreamTarget:
        try:
            return self.full_stream(user_id, track_id)
        except OwnershipRequired:
            #tylko brak uprawnien degraduje do preview, inne bledy leca dalej
            logger.info(f"User {user_id} does not own track {track_id}, serving preview")
            return self.preview(track_id)
