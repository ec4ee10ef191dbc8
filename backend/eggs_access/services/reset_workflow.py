"""Data reset workflow - staged confirmation for the irreversible bulk delete.

Flow for a super admin:

    IDLE -> PREVIEW_LOADING -> PREVIEW_READY -> CONFIRM_PHRASE
         -> CONFIRM_CODE -> EXECUTING -> COMPLETED -> IDLE

Anyone else gets a LOCKED workflow on which every operation raises.

Rules:
1. The only side effect is the bulk delete call made from CONFIRM_CODE.
2. The typed phrase must match CONFIRMATION_PHRASE exactly (case-sensitive).
3. A failed delete returns to CONFIRM_CODE, never to IDLE and never to
   COMPLETED; the user re-confirms explicitly. There is no automatic retry.
4. ``in_flight`` is cleared after every network call, success or failure.
5. Nothing is cancellable once EXECUTING has begun.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

from ..auth.evaluator import AccessContext, is_super_admin
from ..domain.errors import InvalidStateTransitionError, ResetLockedError
from ..domain.ports.reset import ResetPort
from ..errors import ApiError
from ..schemas.reset import ResetPreview, ResetRequest, ResetResult

logger = logging.getLogger(__name__)

CONFIRMATION_PHRASE = "HAPUS SEMUA DATA"
# Workflow-integrity marker checked by the server, not a secret
CONFIRMATION_CODE = "RESET_ALL_DATA_PERMANENT"

LOCKED_MESSAGE = "Fitur reset data hanya dapat diakses oleh Super Admin."
PHRASE_MISMATCH_NOTICE = "Konfirmasi tidak sesuai!"
PREVIEW_FAILED_MESSAGE = "Gagal memuat preview data"
EXECUTE_FAILED_MESSAGE = "Terjadi kesalahan saat melakukan reset"


class ResetState(str, Enum):
    LOCKED = "locked"
    IDLE = "idle"
    PREVIEW_LOADING = "preview_loading"
    PREVIEW_READY = "preview_ready"
    CONFIRM_PHRASE = "confirm_phrase"
    CONFIRM_CODE = "confirm_code"
    EXECUTING = "executing"
    COMPLETED = "completed"


S = ResetState

TRANSITIONS: dict[ResetState, frozenset[ResetState]] = {
    S.LOCKED: frozenset(),
    S.IDLE: frozenset({S.PREVIEW_LOADING}),
    S.PREVIEW_LOADING: frozenset({S.PREVIEW_READY, S.IDLE}),
    S.PREVIEW_READY: frozenset({S.CONFIRM_PHRASE, S.IDLE}),
    S.CONFIRM_PHRASE: frozenset({S.CONFIRM_CODE, S.PREVIEW_READY, S.IDLE}),
    S.CONFIRM_CODE: frozenset({S.EXECUTING, S.PREVIEW_READY, S.IDLE}),
    S.EXECUTING: frozenset({S.COMPLETED, S.CONFIRM_CODE}),
    S.COMPLETED: frozenset({S.IDLE}),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ResetWorkflow:
    def __init__(
        self,
        context: AccessContext,
        reset_port: ResetPort,
        *,
        clock: Callable[[], datetime] = _now,
        on_complete: Callable[[ResetResult], None] | None = None,
    ) -> None:
        self._reset_port = reset_port
        self._clock = clock
        self._on_complete = on_complete

        self.state = S.IDLE if is_super_admin(context) else S.LOCKED
        self.preview: ResetPreview | None = None
        self.total_to_delete = 0
        self.phrase_input = ""
        self.confirmation_code = ""
        self.in_flight = False
        self.error_message: str | None = None
        self.notice: str | None = None
        self.result: ResetResult | None = None

    @property
    def locked(self) -> bool:
        return self.state is S.LOCKED

    @property
    def locked_message(self) -> str | None:
        return LOCKED_MESSAGE if self.locked else None

    @property
    def phrase_matches(self) -> bool:
        return self.phrase_input == CONFIRMATION_PHRASE

    # Transitions

    def _require(self, operation: str, *states: ResetState) -> None:
        if self.locked:
            raise ResetLockedError(LOCKED_MESSAGE)
        if self.state not in states:
            raise InvalidStateTransitionError(
                operation, self.state.value, tuple(s.value for s in states)
            )

    def _move(self, target: ResetState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidStateTransitionError(
                f"move to {target.value}",
                self.state.value,
                tuple(s.value for s, allowed in TRANSITIONS.items() if target in allowed),
            )
        logger.info("reset workflow %s -> %s", self.state.value, target.value)
        self.state = target

    def _clear_confirmation(self) -> None:
        self.phrase_input = ""
        self.confirmation_code = ""
        self.notice = None

    async def load_preview(self) -> None:
        self._require("load preview", S.IDLE)
        self.error_message = None
        self._move(S.PREVIEW_LOADING)
        self.in_flight = True
        try:
            response = await self._reset_port.fetch_preview()
        except ApiError as exc:
            logger.error("reset preview failed kind=%s message=%s", exc.kind.value, exc.message)
            self._preview_failed(exc.message)
        except Exception:
            logger.exception("reset preview failed")
            self._preview_failed(PREVIEW_FAILED_MESSAGE)
        else:
            self.preview = response.preview
            self.total_to_delete = response.total_records_to_delete
            self._move(S.PREVIEW_READY)
        finally:
            self.in_flight = False

    def _preview_failed(self, message: str) -> None:
        self.preview = None
        self.total_to_delete = 0
        self.error_message = message
        self._move(S.IDLE)

    def back(self) -> None:
        """Leave the preview without resetting."""
        self._require("go back", S.PREVIEW_READY)
        self.preview = None
        self.total_to_delete = 0
        self._move(S.IDLE)

    def proceed(self) -> None:
        self._require("proceed", S.PREVIEW_READY)
        self._clear_confirmation()
        self.error_message = None
        self._move(S.CONFIRM_PHRASE)

    def enter_phrase(self, text: str) -> None:
        self._require("enter phrase", S.CONFIRM_PHRASE)
        self.phrase_input = text
        self.notice = None

    def confirm_phrase(self) -> bool:
        self._require("confirm phrase", S.CONFIRM_PHRASE)
        if not self.phrase_matches:
            self.notice = PHRASE_MISMATCH_NOTICE
            return False
        self.notice = None
        self.confirmation_code = CONFIRMATION_CODE
        self._move(S.CONFIRM_CODE)
        return True

    def cancel(self) -> None:
        self._require("cancel", S.CONFIRM_PHRASE, S.CONFIRM_CODE)
        self._clear_confirmation()
        self.error_message = None
        self._move(S.PREVIEW_READY if self.preview is not None else S.IDLE)

    async def execute(self) -> ResetResult | None:
        """Run the bulk delete. Returns the result, or None on failure."""
        self._require("execute", S.CONFIRM_CODE)
        request = ResetRequest(
            confirmation_code=self.confirmation_code,
            confirmation_timestamp=self._clock(),
        )
        self.error_message = None
        self._move(S.EXECUTING)
        self.in_flight = True
        logger.warning(
            "DATA RESET INITIATED - all transactional and master data will be deleted"
        )
        try:
            result = await self._reset_port.execute(request)
        except ApiError as exc:
            logger.error("data reset failed kind=%s message=%s", exc.kind.value, exc.message)
            self.error_message = exc.message
            self._move(S.CONFIRM_CODE)
            return None
        except Exception:
            logger.exception("data reset failed")
            self.error_message = EXECUTE_FAILED_MESSAGE
            self._move(S.CONFIRM_CODE)
            return None
        finally:
            self.in_flight = False

        self.result = result
        self._clear_confirmation()
        self._move(S.COMPLETED)
        logger.warning(
            "DATA RESET COMPLETED - total %s records deleted. Details: %s",
            result.total_deleted,
            "; ".join(result.deletion_log),
        )
        if self._on_complete is not None:
            self._on_complete(result)
        return result

    def dismiss(self) -> None:
        self._require("dismiss", S.COMPLETED)
        self.result = None
        self.preview = None
        self.total_to_delete = 0
        self._move(S.IDLE)
