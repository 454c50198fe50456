"""Helper per eventi di servizio strutturati (JSON) nel log."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("app.events")


def log_structured_event(
    action: str,
    *,
    message: Optional[str] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    """Registra ``action`` e i campi aggiuntivi come attributi del record di log.

    Il formatter JSON configurato in ``app.extensions`` li serializza come
    chiavi di primo livello.
    """
    log_method = getattr(logger, level.lower(), logger.info)

    payload: Dict[str, Any] = {"action": action}
    payload.update(fields)

    log_method(message or action, extra=payload)
