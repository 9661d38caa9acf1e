from __future__ import annotations
import logging
import contextvars
from typing import Any, Callable, Awaitable, Dict

from config import logger as base_logger

# Context variable to store logging context across async calls
current_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "current_context", default={}
)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter injecting contextual fields into log records."""

    def process(self, msg, kwargs):
        context = current_context.get().copy()
        context.update(self.extra)
        context.update(kwargs.pop("extra", {}))
        kwargs["extra"] = context
        return msg, kwargs


def payload_context(payload: Any) -> Dict[str, Any]:
    """Pick the non-sensitive identifiers out of a Slack callback payload."""

    if not isinstance(payload, dict):
        to_dict = getattr(payload, "to_dict", None)
        payload = to_dict() if callable(to_dict) else {}
    user = payload.get("user") or {}
    team = payload.get("team") or {}
    channel = payload.get("channel") or {}
    return {
        "team": team.get("domain") if isinstance(team, dict) else None,
        "user": user.get("name") if isinstance(user, dict) else None,
        "channel": channel.get("id") if isinstance(channel, dict) else None,
    }


def get_logger(step_name: str | None = None, payload: Any = None, **extra: Any) -> ContextLogger:
    """Return a logger enriched with execution context."""

    ctx = {}
    if payload:
        ctx.update({k: v for k, v in payload_context(payload).items() if v is not None})
    if step_name:
        ctx["step_name"] = step_name
    ctx.update({k: v for k, v in extra.items() if v is not None})
    return ContextLogger(base_logger, ctx)


def wrap_operation(step_name: str, func: Callable[..., Awaitable[Any]]):
    """Wrap an async operation with contextual start/done/failed logging."""

    async def wrapper(*args: Any, **kwargs: Any):
        token = current_context.set({"step_name": step_name})
        log = get_logger(step_name)
        log.info("start")
        try:
            result = await func(*args, **kwargs)
            log.debug("response ready", extra={"output": result})
            log.info("done")
            return result
        except Exception:
            log.exception("failed")
            raise
        finally:
            current_context.reset(token)

    return wrapper
