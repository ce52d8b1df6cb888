"""JSON encoding hooks for Duration values.

Decoding goes through :meth:`Duration.from_json_value`, either directly
or through a pydantic model field typed as ``Duration``.
"""

from __future__ import annotations

import json
from typing import Any

from pyfunks.duration import Duration


class DurationJSONEncoder(json.JSONEncoder):
    """JSONEncoder that writes Duration values as their canonical string."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Duration):
            return o.to_json_value()
        return super().default(o)


def dumps(obj: Any, **kwargs: Any) -> str:
    """``json.dumps`` with Duration support; non-ASCII units are kept as-is."""
    kwargs.setdefault("cls", DurationJSONEncoder)
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(obj, **kwargs)
