"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LinkPrecedence(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
