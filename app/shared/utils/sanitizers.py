# app/shared/utils/sanitizers.py
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

# Un solo paso de traducción: los ';' de las entidades generadas no se re-escapan
_HTML_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    "'": "&#x27;",
    '"': "&quot;",
    ";": "&#59;",
})

CENTS = Decimal("0.01")


def sanitize_business_name(name: str) -> str:
    """Escapar < > ' \" ; y recortar espacios"""
    return name.translate(_HTML_ESCAPES).strip()


def sanitize_account_number(account_number: str) -> str:
    return re.sub(r"[^0-9]", "", account_number)


def sanitize_amount(amount: Union[Decimal, int, float, str]) -> Decimal:
    """Valor absoluto redondeado a 2 decimales"""
    return abs(Decimal(str(amount))).quantize(CENTS, rounding=ROUND_HALF_UP)
