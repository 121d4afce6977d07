from __future__ import annotations

"""
Polling acotado de runs asíncronos (assistant/thread/run).

`RunPoller` es una máquina de estados explícita:

    polling ──(status completed)──────────────▶ completed
       │ ──(status failed/cancelled/...)──────▶ failed     → RunFailedError
       │ ──(max_attempts sin estado terminal)─▶ timed_out  → RunTimeoutError

El reloj se inyecta (`sleep`) para que los tests no esperen de verdad.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .errors import RunFailedError, RunTimeoutError

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({"completed"})
FAILURE_STATUSES = frozenset({"failed", "cancelled", "expired", "incomplete", "requires_action"})


class PollState(str, Enum):
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


def _error_message(run: Any) -> Optional[str]:
    last_error = getattr(run, "last_error", None)
    if last_error is None:
        return None
    return getattr(last_error, "message", None) or str(last_error)


@dataclass
class RunPoller:
    """
    Consulta `fetch()` hasta que el run llegue a un estado terminal.

    Attributes:
        fetch: Devuelve el run actual (objeto con `.status`).
        max_attempts: Cantidad máxima de consultas.
        interval_s: Espera entre consultas (no se espera después de la última).
        sleep: Función de espera; `time.sleep` por defecto.
    """

    fetch: Callable[[], Any]
    max_attempts: int = 60
    interval_s: float = 1.0
    sleep: Callable[[float], None] = time.sleep
    state: PollState = field(default=PollState.POLLING, init=False)
    attempts: int = field(default=0, init=False)
    last_status: Optional[str] = field(default=None, init=False)

    def wait(self) -> Any:
        """
        Hace polling hasta un estado terminal.

        Returns:
            El run en estado `completed`.

        Raises:
            RunFailedError: el run terminó en un estado de error.
            RunTimeoutError: se agotaron los intentos sin estado terminal.
        """
        if self.max_attempts < 1:
            raise ValueError("max_attempts debe ser >= 1")

        while self.state is PollState.POLLING:
            run = self.fetch()
            self.attempts += 1
            self.last_status = getattr(run, "status", None)
            logger.debug(f"Run status (intento {self.attempts}/{self.max_attempts}): {self.last_status}")

            if self.last_status in SUCCESS_STATUSES:
                self.state = PollState.COMPLETED
                return run

            if self.last_status in FAILURE_STATUSES:
                self.state = PollState.FAILED
                raise RunFailedError(self.last_status, _error_message(run))

            if self.attempts >= self.max_attempts:
                self.state = PollState.TIMED_OUT
                raise RunTimeoutError(self.attempts, self.last_status)

            self.sleep(self.interval_s)

        raise RuntimeError(f"RunPoller ya terminó en estado {self.state.value}")
