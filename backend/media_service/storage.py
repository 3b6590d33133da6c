"""
Filesystem blob area for uploaded media.

Layout: <media_dir>/event_<id>/<timestamp_ns>_<sanitised-filename>
"""

import os
import shutil
import time
from typing import BinaryIO

from werkzeug.utils import secure_filename


class BlobStore:
    def __init__(self, root: str):
        self.root = root

    def event_dir(self, event_id: int) -> str:
        return os.path.join(self.root, f"event_{event_id}")

    def save(self, event_id: int, stream: BinaryIO, filename: str) -> str:
        """
        Write an upload under the event's directory.

        The nanosecond prefix keeps same-second uploads of the same file apart;
        the file is opened exclusively so an existing blob is never overwritten.
        A partially written file is removed before the error propagates.

        Returns:
            str: Path of the written file.

        Raises:
            OSError: If the directory or file cannot be written.
            Exception: Whatever the upload stream raises while being read.
        """
        directory = self.event_dir(event_id)
        os.makedirs(directory, exist_ok=True)

        safe_name = secure_filename(filename or "") or "upload"
        path = os.path.join(directory, f"{time.time_ns()}_{safe_name}")

        dst = open(path, "xb")
        try:
            with dst:
                shutil.copyfileobj(stream, dst)
        except Exception:
            self.remove(path)
            raise
        return path

    def remove(self, path: str) -> bool:
        """
        Delete a blob.

        Returns:
            bool: False if the file was already gone, True otherwise.

        Raises:
            OSError: For any failure other than the file not existing.
        """
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        return True

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def remove_event_dir(self, event_id: int) -> None:
        directory = self.event_dir(event_id)
        if os.path.isdir(directory):
            shutil.rmtree(directory)
