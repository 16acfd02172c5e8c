from __future__ import annotations

import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, TextIO


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(text: str, *, limit: int) -> str:
    s = str(text or "")
    if limit <= 0:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 1)] + "…"


class _Stream:
    """Shared file handle for a logger and the loggers bound from it."""

    def __init__(self, path: Path, *, overwrite: bool) -> None:
        self.path = path
        self.overwrite = overwrite
        self.fp: TextIO | None = None
        self.lock = Lock()
        self.opened = False

    def ensure_open(self) -> None:
        with self.lock:
            if self.fp is not None:
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            mode = "w" if self.overwrite and not self.opened else "a"
            self.fp = self.path.open(mode, encoding="utf-8", newline="\n")
            self.opened = True

    def write(self, line: str) -> None:
        self.ensure_open()
        with self.lock:
            if self.fp is None:
                return
            self.fp.write(line + "\n")
            self.fp.flush()

    def close(self) -> None:
        with self.lock:
            if self.fp is not None:
                try:
                    self.fp.flush()
                finally:
                    self.fp.close()
                self.fp = None


class RunLogger:
    """
    JSONL logger for scrape sessions.

    Each line is one JSON object. `bind()` returns a logger that adds fixed
    context (page type, entity, ...) to every record it writes.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        overwrite: bool = True,
        session_id: str | None = None,
        context: dict[str, Any] | None = None,
        _stream: _Stream | None = None,
    ) -> None:
        self._stream = _stream or _Stream(Path(path), overwrite=bool(overwrite))
        self._session_id = (session_id or "").strip() or uuid.uuid4().hex
        self._context = dict(context or {})

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        overwrite: bool = True,
        session_id: str | None = None,
    ) -> "RunLogger":
        logger = cls(path, overwrite=overwrite, session_id=session_id)
        logger._stream.ensure_open()
        return logger

    @property
    def path(self) -> Path:
        return self._stream.path

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "RunLogger":
        self._stream.ensure_open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def bind(self, **context: Any) -> "RunLogger":
        merged = {**self._context, **{k: v for k, v in context.items() if v is not None}}
        return RunLogger(
            self._stream.path,
            session_id=self._session_id,
            context=merged,
            _stream=self._stream,
        )

    def info(self, event: str, *, url: str | None = None, **data: Any) -> None:
        self.log("INFO", event, url=url, **data)

    def warning(self, event: str, *, url: str | None = None, **data: Any) -> None:
        self.log("WARN", event, url=url, **data)

    def error(self, event: str, *, url: str | None = None, **data: Any) -> None:
        self.log("ERROR", event, url=url, **data)

    def exception(
        self,
        event: str,
        *,
        exc: BaseException,
        url: str | None = None,
        **data: Any,
    ) -> None:
        err = {
            "type": type(exc).__name__,
            "message": _truncate(str(exc), limit=2000),
            "traceback": _truncate(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                limit=12000,
            ),
        }
        self.log("ERROR", event, url=url, error=err, **data)

    def log(self, level: str, event: str, *, url: str | None = None, **data: Any) -> None:
        record: dict[str, Any] = {
            "ts": _utc_now_iso(),
            "level": (level or "").strip().upper() or "INFO",
            "event": (event or "").strip() or "event",
            "session_id": self._session_id,
        }

        if self._context:
            record["context"] = self._context

        u = (url or "").strip()
        if u:
            record["url"] = u

        if data:
            record["data"] = data

        self._stream.write(
            json.dumps(
                record,
                ensure_ascii=False,
                sort_keys=True,
                separators=(",", ":"),
                default=str,
            )
        )
