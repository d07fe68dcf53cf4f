from __future__ import annotations

from typing import Any, Dict, Optional

# Error codes (avoid string typos)
INVALID_ITEM = "INVALID_ITEM"
NEGATIVE_PRICE = "NEGATIVE_PRICE"
INVALID_QUANTITY = "INVALID_QUANTITY"
MALFORMED_ROSTER = "MALFORMED_ROSTER"


class InvalidInput(Exception):
    """
    Raised when an OrderSnapshot can not be priced.

    This is a caller validation error, not a system fault: the engine never
    clamps or repairs input, it rejects before computing anything.
    """

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        self.code = str(code)
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "meta": dict(self.meta)}
