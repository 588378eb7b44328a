# app/shared/utils/masking.py
from typing import Optional

VISIBLE_DIGITS = 4


def mask_account(account_number: Optional[str]) -> Optional[str]:
    """Ocultar todo menos los últimos 4 caracteres de una cuenta"""
    if account_number is None or len(account_number) <= VISIBLE_DIGITS:
        return account_number
    hidden = len(account_number) - VISIBLE_DIGITS
    return "*" * hidden + account_number[-VISIBLE_DIGITS:]
