"""
Helpers for serializing parse results.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from .types import RangedEvent


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # Pretty-printing was requested when indent is passed
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def rangedEventToDict(rangedEvent: RangedEvent) -> Dict[str, Any]:
    """``(ByteRange, event)`` as a JSON-friendly dict with a ``range`` pair."""
    byteRange, event = rangedEvent
    result = event.toDict()
    result["range"] = [byteRange.start, byteRange.end]
    return result


def eventsToDicts(events: Iterable[RangedEvent]) -> List[Dict[str, Any]]:
    return [rangedEventToDict(rangedEvent) for rangedEvent in events]
