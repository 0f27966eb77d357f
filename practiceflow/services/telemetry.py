import json
import logging
import time
from functools import wraps
from typing import Optional

from practiceflow.core.config import get_settings

logger = logging.getLogger("practiceflow.telemetry")


def emit_event(event: str, *, operation: str, template: Optional[str] = None,
               difficulty: Optional[int] = None, target: Optional[float] = None,
               fallback: Optional[str] = None, latency_ms: Optional[int] = None,
               ok: Optional[bool] = None, **extra) -> Optional[dict]:
    """Log one audit event as single-line JSON. No-op unless audit_selections is on."""
    if not get_settings().audit_selections:
        return None
    payload = {
        "event": event,
        "operation": operation,
        "template": template,
        "difficulty": difficulty,
        "target": round(target, 1) if target is not None else None,
        "fallback": fallback,
        "latency_ms": latency_ms,
        "ok": ok,
        "ts": time.time(),
        **extra,
    }
    # log as single-line JSON for easy parsing
    logger.info("telemetry=%s", json.dumps(payload, separators=(",", ":"), default=str))
    return payload


def instrument(operation: str):
    """Time a generation call and emit a `selection_call` event when auditing."""
    def deco(fn):
        @wraps(fn)
        def wrapped(*args, **kwargs):
            t0 = time.time()
            ok = True
            err = None
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                ok = False
                err = e.__class__.__name__
                raise
            finally:
                dt = int((time.time() - t0) * 1000)
                emit_event("selection_call", operation=operation, latency_ms=dt, ok=ok, error_type=err)
        return wrapped
    return deco
