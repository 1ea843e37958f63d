"""Identifier helpers shared by the record models."""

from __future__ import annotations

import uuid


def new_id() -> str:
    return str(uuid.uuid4())
