"""
Media store rules.

A media row and its blob are created and deleted as a unit:
- upload writes the blob first and only then inserts the row; if the insert
  fails the blob is removed again;
- delete removes the blob first (a blob that is already gone is fine) and only
  then the row; if the blob cannot be removed the row stays for a retry.

A crash between blob write and row insert can still leave an orphaned file.
"""

import logging
from typing import BinaryIO, List

from backend.errors import InternalError, NotFoundError, ValidationError
from backend.models import VALID_MEDIA_TYPES, Media


class MediaService:
    def __init__(self, media, events, blobs):
        self.media = media
        self.events = events
        self.blobs = blobs

    def _require_event(self, event_id: int) -> None:
        if self.events.get(event_id) is None:
            raise NotFoundError("event not found")

    def upload(self, event_id: int, stream: BinaryIO, filename: str, media_type: str) -> Media:
        """
        Store an uploaded file and record it against an event.

        Raises:
            ValidationError: media_type is not photo/video (nothing is written).
            NotFoundError: The event does not exist.
            InternalError: The blob or the row could not be written.
        """
        if media_type not in VALID_MEDIA_TYPES:
            raise ValidationError("invalid media type")

        self._require_event(event_id)

        try:
            path = self.blobs.save(event_id, stream, filename)
        except OSError as e:
            raise InternalError(f"failed to save file: {e}") from e

        try:
            media = self.media.create(Media(id=None, event_id=event_id, file_path=path, type=media_type))
        except Exception as e:
            self._discard(path)
            raise InternalError(f"failed to save media record: {e}") from e

        logging.info(f"[Media] Stored {media_type} {media.id} for event {event_id}")
        return media

    def _discard(self, path: str) -> None:
        """Compensating delete for a blob whose row never made it."""
        try:
            self.blobs.remove(path)
            logging.warning(f"[Media] Removed blob {path} after failed record insert")
        except OSError as e:
            logging.error(f"[Media] Orphaned blob {path} could not be removed: {e}")

    def delete(self, media_id: int) -> None:
        """
        Raises:
            NotFoundError: No such media row.
            InternalError: The blob exists but could not be removed; the row
                is left in place.
        """
        media = self.get_media(media_id)

        try:
            removed = self.blobs.remove(media.file_path)
        except OSError as e:
            raise InternalError(f"failed to delete file {media.file_path}: {e}") from e

        if not removed:
            logging.info(f"[Media] Blob for media {media_id} was already missing")

        self.media.delete(media_id)

    def get_event_media(self, event_id: int) -> List[Media]:
        self._require_event(event_id)
        return self.media.list_for_event(event_id)

    def get_media(self, media_id: int) -> Media:
        media = self.media.get(media_id)
        if media is None:
            raise NotFoundError("media not found")
        return media

    def media_file(self, media_id: int) -> Media:
        """Media whose blob is present on disk."""
        media = self.get_media(media_id)
        if not self.blobs.exists(media.file_path):
            raise NotFoundError("media file not found")
        return media
