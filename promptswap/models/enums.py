"""Enum definitions for swap actions.

Replaces scattered string literals so routes and action handlers agree on
the closed set of verbs.
"""
from __future__ import annotations
import enum


class SwapAction(str, enum.Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"
    FULFILL = "fulfill"
    EXPIRE = "expire"


__all__ = ["SwapAction"]
