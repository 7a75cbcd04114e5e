"""Base model for everything that crosses the wire or the session store."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Snake_case in Python, camelCase aliases on the wire.

    Both spellings are accepted on input; enum members are stored as their
    values so dumped payloads carry ``"bar"`` rather than ``ChartType.BAR``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def serializable_dict(self, *, exclude_none: bool = True, **kwargs: Any) -> dict[str, Any]:
        """JSON-ready dict keyed by wire names; ``None`` fields are omitted unless asked for."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none, **kwargs)


__all__ = ["BaseSchema"]
