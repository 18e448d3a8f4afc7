"""Shared type aliases for structured workflow documents."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Literal

type Scalar = str | int | float | bool | None
type StructuredValue = (
    Scalar | list["StructuredValue"] | dict[Scalar, "StructuredValue"]
)
type StructuredDocument = StructuredValue
type QuoteStyle = Literal['"', "'"]
type ConfirmOverwrite = Callable[[Path], Awaitable[bool]]
