"""
View State Machine

Owns the page state for one browser session and applies the only three
transitions that change it:

    INPUT  --submit(success)-->  RESULT
    INPUT  --submit(failure)-->  INPUT   (error message stored)
    RESULT --reset-->            INPUT   (result and error cleared)

The is_loading flag is the sole concurrency guard. A submission that
arrives while another is in flight is refused without calling the model.
Each state update is applied under a lock; the model call itself is
awaited outside it.
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Protocol

from .errors import AnalysisError
from .prompts import AnalysisMode
from .schema import AnalysisResult

logger = logging.getLogger(__name__)


class ViewState(Enum):
    INPUT = "input"
    RESULT = "result"


class Analyzer(Protocol):
    async def analyze(
        self, user_input: str, mode: str | AnalysisMode, fast_track: bool
    ) -> AnalysisResult: ...


@dataclass(frozen=True)
class AppState:
    """Snapshot of everything the page renders from."""
    view: ViewState = ViewState.INPUT
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    is_loading: bool = False
    last_input: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "view": self.view.value,
            "result": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
            "is_loading": self.is_loading,
            "last_input": self.last_input,
        }


class AnalysisSession:
    """
    One page's state plus the analyzer that drives it.

    Usage:
        session = AnalysisSession(AnalysisClient())
        accepted = await session.submit("Efficient LLM Inference", "idea", False)
        session.reset()
    """

    def __init__(self, analyzer: Analyzer):
        self.analyzer = analyzer
        self._state = AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        with self._lock:
            return self._state

    @property
    def is_busy(self) -> bool:
        return self.state.is_loading

    async def submit(self, user_input: str, mode: str | AnalysisMode, fast_track: bool) -> bool:
        """
        Run one analysis and apply the resulting transition.

        Returns:
            True if the submission was accepted and the model was called,
            False if it was refused (blank input, busy, or not on the input view)
        """
        if not user_input or not user_input.strip():
            logger.warning("Submission ignored: input is blank")
            return False

        with self._lock:
            if self._state.is_loading:
                logger.warning("Submission ignored: an analysis is already in flight")
                return False
            if self._state.view is not ViewState.INPUT:
                logger.warning("Submission ignored: reset to the input view first")
                return False
            self._state = replace(self._state, is_loading=True, error=None, last_input=user_input)

        try:
            result = await self.analyzer.analyze(user_input, mode, fast_track)
        except AnalysisError as e:
            logger.warning(f"Analysis failed, staying on input view: {e.__cause__ or e}")
            with self._lock:
                self._state = AppState(
                    view=ViewState.INPUT,
                    result=None,
                    error=AnalysisError.USER_MESSAGE,
                    is_loading=False,
                    last_input=user_input,
                )
            return True
        except BaseException:
            with self._lock:
                self._state = replace(self._state, is_loading=False)
            raise

        with self._lock:
            self._state = AppState(
                view=ViewState.RESULT,
                result=result,
                error=None,
                is_loading=False,
                last_input=user_input,
            )
        return True

    def reset(self) -> AppState:
        """Return to the input view, clearing result and error."""
        with self._lock:
            self._state = AppState(
                view=ViewState.INPUT,
                result=None,
                error=None,
                is_loading=self._state.is_loading,
                last_input=self._state.last_input,
            )
            return self._state
