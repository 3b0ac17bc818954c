from __future__ import annotations

import sys
from datetime import UTC, datetime

import orjson


def log_json(payload: dict[str, object]) -> None:
    line = orjson.dumps(payload, default=str, option=orjson.OPT_NON_STR_KEYS)
    sys.stdout.write(line.decode("utf-8") + "\n")
    sys.stdout.flush()


def log_event(level: str, event: str, **fields: object) -> None:
    payload: dict[str, object] = {
        "ts": datetime.now(UTC).isoformat(),
        "level": str(level),
        "event": str(event),
    }
    payload.update(fields)
    log_json(payload)


def error_text(exc: BaseException, *, limit: int = 400) -> str:
    return f"{type(exc).__name__}: {exc}"[:limit]
