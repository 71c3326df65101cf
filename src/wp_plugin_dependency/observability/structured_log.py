import json
from datetime import datetime, timezone
from logging import INFO, Logger
from typing import Any, Dict

from wp_plugin_dependency.util import redact


def log_json(logger: Logger, event: str, level: int = INFO, **fields: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    payload.update(fields)
    logger.log(level, redact(json.dumps(payload, ensure_ascii=True, sort_keys=True, default=str)))
