"""Attribute-safe JSON payloads embedded in rendered markup.

Interactive elements carry a small :class:`ActionRef` in a ``data-ref``
attribute. The reference names the action and the stable key it applies
to (e.g. a rover name); it never carries state, which is always looked up
live by the coordinator when the action is dispatched.
"""

from __future__ import annotations

import html
import json
from collections.abc import Mapping
from typing import Any, TypeVar, overload

from pydantic import BaseModel, ConfigDict

M = TypeVar("M", bound=BaseModel)


class ActionRef(BaseModel):
    """Reference from a rendered control back to a coordinator action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: str
    key: str | None = None


def encode_inline(value: BaseModel | Mapping[str, Any]) -> str:
    """Serialize *value* to JSON and escape it for use inside an HTML attribute."""
    data = value.model_dump(mode="json") if isinstance(value, BaseModel) else dict(value)
    text = json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return html.escape(text, quote=True)


@overload
def decode_inline(text: str) -> Any: ...


@overload
def decode_inline(text: str, model: type[M]) -> M: ...


def decode_inline(text: str, model: type[M] | None = None) -> Any:
    """Inverse of :func:`encode_inline`.

    Accepts the attribute text either still escaped (as it appears in the
    markup) or already unescaped (as a DOM ``dataset`` read returns it).
    """
    data = json.loads(html.unescape(text))
    if model is None:
        return data
    return model.model_validate(data)
