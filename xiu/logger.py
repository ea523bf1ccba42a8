"""A log sink that writes to files rotated by day, hour or minute."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import BinaryIO


class LogError(Exception):
    """Raised when a log file or directory cannot be created."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"write file error: {cause}")


class Rotate(Enum):
    """How often a new log file is started."""

    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"


_NAME_FORMATS = {
    Rotate.DAY: "%Y-%m-%d 00:00:00",
    Rotate.HOUR: "%Y-%m-%d %H:00:00",
    Rotate.MINUTE: "%Y-%m-%d %H:%M:00",
}


class FileTarget:
    """A writable stream that sends each write to the current period's file."""

    def __init__(
        self,
        rotate: Rotate,
        path: str,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as err:
            raise LogError(err) from err
        self.rotate = rotate
        self.path = path
        self._clock = clock
        self._file: BinaryIO | None = None

    def log_file_name(self, now: datetime | None = None) -> str:
        """Name of the file for the period containing ``now`` (local time)."""
        if now is None:
            now = self._clock()
        return now.strftime(_NAME_FORMATS[self.rotate])

    def write(self, data: bytes | str) -> int:
        """Write ``data`` and return the number of bytes written.

        A new file is created when the current period's file does not exist
        yet; otherwise writes go to the file already open, if any.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        full_path = os.path.join(self.path, self.log_file_name(self._clock()))
        if not os.path.exists(full_path):
            self.close()
            try:
                self._file = open(full_path, "wb", buffering=0)
            except OSError as err:
                raise LogError(err) from err
        if self._file is None:
            return 0
        try:
            return self._file.write(data) or 0
        except OSError as err:
            print(f"write err {err}", file=sys.stderr)
            return 0

    def flush(self) -> None:
        """Writes are unbuffered; this only flushes the open file handle."""
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> FileTarget:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()