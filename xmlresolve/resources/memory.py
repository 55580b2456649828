from __future__ import annotations

import io
from typing import BinaryIO

from .base import Resource


class ByteArrayResource(Resource):
    """In-memory resource, used to re-expose content under a different identity."""

    def __init__(self, data: bytes, description: str = "") -> None:
        if data is None:
            raise ValueError("Byte array must not be None")
        self._data = bytes(data)
        self._description = description or "resource loaded from byte array"

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def description(self) -> str:
        return f"byte array [{self._description}]"

    def exists(self) -> bool:
        return True

    def open(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ByteArrayResource) and other._data == self._data

    def __hash__(self) -> int:
        return hash(self._data)
