# app/modules/transfers/status_machine.py
import logging
from typing import Dict, FrozenSet, Optional

from app.core.exceptions import ConflictError
from app.shared.database.models import TransferStatus

ALLOWED_TRANSITIONS: Dict[TransferStatus, FrozenSet[TransferStatus]] = {
    TransferStatus.PENDING: frozenset({
        TransferStatus.COMPLETED,
        TransferStatus.FAILED,
        TransferStatus.REVERSED,
    }),
    TransferStatus.COMPLETED: frozenset({TransferStatus.REVERSED}),
    TransferStatus.FAILED: frozenset(),
    TransferStatus.REVERSED: frozenset(),
}


class TransferStatusMachine:
    """
    Tabla de transiciones de estado de una transferencia.

    En modo permisivo cualquier cambio se acepta y los que salen de la tabla
    solo se registran como warning; en modo estricto se rechazan con 409.
    """

    def __init__(self, strict: bool = False, logger: Optional[logging.Logger] = None):
        self.strict = strict
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def is_allowed(current: TransferStatus, target: TransferStatus) -> bool:
        return current == target or target in ALLOWED_TRANSITIONS[current]

    def check(self, current: str, target: str) -> TransferStatus:
        """Validar la transición y devolver el estado destino"""
        current_status = TransferStatus(current)
        target_status = TransferStatus(target)

        if self.is_allowed(current_status, target_status):
            return target_status

        if self.strict:
            raise ConflictError(
                f"Transición de estado no permitida: {current_status.value} → {target_status.value}",
                error_code="INVALID_STATUS_TRANSITION",
                details={"from": current_status.value, "to": target_status.value}
            )

        self.logger.warning(
            f"⚠️ Transición fuera de la tabla aceptada: {current_status.value} → {target_status.value}"
        )
        return target_status
