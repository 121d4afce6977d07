from __future__ import annotations

"""
lecture_ai_core.cleanup
=======================

Liberación best-effort de recursos temporales de una corrida.

Cada recurso (archivo local, archivo remoto, assistant, thread) se registra como
un "guard" en un `CleanupStack` apenas se crea. Al salir (con éxito o con error)
se liberan todos en orden inverso. Un guard que falla:

- se loguea como warning,
- queda guardado en `errors`,
- no impide liberar el resto,
- nunca se propaga al llamador.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class CleanupFailure:
    """Un guard que no se pudo liberar."""
    description: str
    error: Exception


class CleanupStack:
    """
    Pila de guards de limpieza.

    Uso:
        with CleanupStack() as cleanup:
            handle = upload(...)
            cleanup.push(f"archivo remoto {handle.file_id}", lambda: delete(handle))
            ...
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._guards: List[Tuple[str, Callable[[], None]]] = []
        self._log = log or logger
        self.errors: List[CleanupFailure] = []

    def push(self, description: str, release: Callable[[], None]) -> None:
        self._guards.append((description, release))

    def __len__(self) -> int:
        return len(self._guards)

    def release_all(self) -> List[CleanupFailure]:
        """
        Libera todos los guards pendientes (LIFO). Cada guard corre una sola vez:
        llamar de nuevo no repite liberaciones ya hechas.

        Returns:
            Las fallas ocurridas en esta llamada.
        """
        failures: List[CleanupFailure] = []
        while self._guards:
            description, release = self._guards.pop()
            try:
                release()
            except Exception as e:
                self._log.warning(f"No se pudo liberar {description}: {e}")
                failures.append(CleanupFailure(description=description, error=e))
        self.errors.extend(failures)
        return failures

    def __enter__(self) -> "CleanupStack":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release_all()
        return False


def remove_local_file(path: str | Path) -> None:
    """Borra un archivo local. Si ya no existe, no hace nada."""
    Path(path).unlink(missing_ok=True)
