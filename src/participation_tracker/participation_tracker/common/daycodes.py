from __future__ import annotations

import secrets

from ..core.constants import DAYCODE_ALPHABET, DEFAULT_DAYCODE_LENGTH


def generate_daycode(length: int = DEFAULT_DAYCODE_LENGTH) -> str:
    return "".join(secrets.choice(DAYCODE_ALPHABET) for _ in range(int(length)))


def normalize_daycode(code: str) -> str:
    return (code or "").strip().lower()
