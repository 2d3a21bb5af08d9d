from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Optional, TextIO, Type
import json
import threading

from signalset.decoder.decoder import DecodedResponse


class JsonlWriter:
    """Writes decoded output as one compact JSON object per line.

    The file is created (or emptied) when the writer opens and stays open
    until :meth:`close`. Each record is flushed as soon as it is written, and
    a lock keeps lines whole when replay callbacks run on several threads.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.count = 0
        self._lock = threading.Lock()

        path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = path.open("w", encoding="utf-8")

    def append(self, obj: Dict[str, Any]) -> None:
        line = json.dumps(obj, separators=(",", ":"), ensure_ascii=False) + "\n"
        with self._lock:
            if self._file is None:
                raise ValueError(f"{self.path} is closed")
            self._file.write(line)
            self._file.flush()
            self.count += 1

    def append_response(self, response: DecodedResponse, timestamp_ns: int = 0) -> None:
        """Write a decoded response, stamped with its capture time."""
        record = response.to_dict()
        record["timestamp_ns"] = timestamp_ns
        self.append(record)

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "JsonlWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()
