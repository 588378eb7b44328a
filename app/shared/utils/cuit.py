# app/shared/utils/cuit.py
"""
Validación y formato de CUIT (Clave Única de Identificación Tributaria).

Un CUIT tiene 11 dígitos: prefijo de 2 dígitos, 8 dígitos de documento y un
dígito verificador calculado con módulo 11.
"""
import re
from typing import Optional

CUIT_PATTERN = re.compile(r"^(20|23|24|25|26|27|30|33|34)[0-9]{9}$")
CUIT_MULTIPLIERS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)


def clean_cuit(cuit: Optional[str]) -> str:
    """Eliminar todo lo que no sea dígito"""
    if not cuit:
        return ""
    return re.sub(r"[^0-9]", "", cuit)


def calculate_check_digit(payload: str) -> int:
    """
    Calcular el dígito verificador para los 10 primeros dígitos.

    Si el resto es 0 el dígito es 0; en otro caso es 11 - resto (un resultado
    de 10 nunca coincide con un dígito, por lo que ese CUIT es inválido).
    """
    total = sum(int(digit) * weight for digit, weight in zip(payload, CUIT_MULTIPLIERS))
    remainder = total % 11
    return 0 if remainder == 0 else 11 - remainder


def is_valid_cuit(cuit: Optional[str]) -> bool:
    """Validar formato (prefijo + 11 dígitos) y dígito verificador"""
    try:
        digits = clean_cuit(cuit)
        if not CUIT_PATTERN.match(digits):
            return False
        return calculate_check_digit(digits[:10]) == int(digits[10])
    except (TypeError, ValueError):
        return False


def format_cuit(cuit: str) -> str:
    """
    Normalizar un CUIT al formato XX-XXXXXXXX-X.

    Acepta el CUIT con o sin guiones; si no tiene 11 dígitos se devuelve
    sin cambios.
    """
    digits = clean_cuit(cuit)
    if len(digits) != 11:
        return cuit
    return f"{digits[:2]}-{digits[2:10]}-{digits[10]}"
