"""Response envelopes and the error boundary shared by all tool handlers."""
import functools
import inspect
import logging
from typing import Any, Dict, List, Sequence

import pydantic

from core.errors import NotFoundError, RoadmapError, ValidationError
from core.models import RoadmapItem

logger = logging.getLogger(__name__)

# Handler parameters that are injected by the server rather than sent by callers
INJECTED_PARAMS = ("fetcher",)


def items_envelope(items: Sequence[RoadmapItem], total: int, **extra: Any) -> Dict[str, Any]:
    envelope: Dict[str, Any] = dict(extra)
    envelope["total"] = total
    envelope["returned"] = len(items)
    envelope["items"] = [item.to_api_dict() for item in items]
    return envelope


def page_envelope(
    items: Sequence[RoadmapItem], limit: int, offset: int = 0, with_offset: bool = False, **extra: Any
) -> Dict[str, Any]:
    """Slice `items` to `[offset, offset + limit)` and report whether more remain."""
    page = list(items[offset:offset + limit])
    envelope = items_envelope(page, total=len(items), **extra)
    if with_offset:
        envelope["offset"] = offset
    envelope["limit"] = limit
    envelope["hasMore"] = offset + limit < len(items)
    return envelope


def error_envelope(error: RoadmapError, context: Dict[str, Any]) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {"isError": True}
    envelope.update(error.to_dict())
    envelope["context"] = {**context, **error.context}
    return envelope


def is_error(result: Any) -> bool:
    return isinstance(result, dict) and bool(result.get("isError"))


def _format_validation_error(e: pydantic.ValidationError) -> str:
    problems: List[str] = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part not in INJECTED_PARAMS)
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid arguments: " + "; ".join(problems)


def _call_context(sig: inspect.Signature, args: tuple, kwargs: dict) -> Dict[str, Any]:
    try:
        bound = sig.bind_partial(*args, **kwargs).arguments
    except TypeError:
        bound = dict(kwargs)
    return {k: v for k, v in bound.items() if k not in INJECTED_PARAMS}


def tool_handler(func):
    """Turn every failure of an async tool handler into an error envelope.

    The wrapped handler never raises: roadmap errors become envelopes carrying
    their kind and message, argument validation failures become ValidationError
    envelopes, and anything unexpected is logged with its traceback.
    """
    sig = inspect.signature(func)

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        context = _call_context(sig, args, kwargs)
        try:
            return await func(*args, **kwargs)
        except pydantic.ValidationError as e:
            return error_envelope(ValidationError(_format_validation_error(e)), context)
        except NotFoundError as e:
            logger.info("%s: %s", func.__name__, e.message)
            return error_envelope(e, context)
        except RoadmapError as e:
            logger.error("%s failed: %s", func.__name__, e.message)
            return error_envelope(e, context)
        except Exception as e:
            logger.exception("Unexpected error in %s", func.__name__)
            return {"isError": True, "error": "InternalError", "message": f"Error: {e}", "context": context}

    return wrapper


# validate_call for handlers: the injected fetcher is checked with isinstance only
validated = pydantic.validate_call(config=pydantic.ConfigDict(arbitrary_types_allowed=True))
