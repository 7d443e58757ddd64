"""
Identifier validation and small demographic helpers.

National IDs (cédula) are accepted with or without the dash after the
nationality letter and stored in the canonical ``V-12345678`` form.
History numbers are three two-digit groups, e.g. ``12-34-56``.
"""
from __future__ import annotations

import datetime as dt
import re

import bleach

CI_RE = re.compile(r'^([VEP])-?(\d{7,9})$')
HISTORY_NUMBER_RE = re.compile(r'^\d{2}-\d{2}-\d{2}$')
PHONE_RE = re.compile(r'^\d{4}-?\d{6,8}$')


def normalize_ci(value: str | None) -> str | None:
    """Return the canonical ``L-digits`` form, or None when invalid."""
    m = CI_RE.match((value or '').strip().upper())
    if not m:
        return None
    return f"{m.group(1)}-{m.group(2)}"


def is_valid_history_number(value: str | None) -> bool:
    return bool(HISTORY_NUMBER_RE.match((value or '').strip()))


def is_valid_phone(value: str | None) -> bool:
    return bool(PHONE_RE.match((value or '').strip()))


def clean_text(value: str | None) -> str:
    return bleach.clean((value or '').strip(), tags=set(), attributes={}, strip=True)


def calculate_age(birth_date: dt.date | None, today: dt.date | None = None) -> int | None:
    """Age in whole years; one less when this year's birthday is still ahead."""
    if birth_date is None:
        return None
    today = today or dt.date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
