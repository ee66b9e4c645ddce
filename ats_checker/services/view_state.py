from __future__ import annotations

import threading
from collections import OrderedDict

from ats_checker.schemas.analysis import AnalysisResult, ViewName

LANDING: ViewName = "landing"
UPLOAD: ViewName = "upload"
RESULTS: ViewName = "results"


class InvalidViewTransition(ValueError):
    pass


class ViewController:
    """Tri-state view machine: landing -> upload -> results -> upload.

    At most one analysis result is held; it is only written once an
    analysis call has returned.
    """

    def __init__(self) -> None:
        self._view: ViewName = LANDING
        self._result: AnalysisResult | None = None

    @property
    def view(self) -> ViewName:
        return self._view

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    def get_started(self) -> ViewName:
        return self.navigate(UPLOAD)

    def navigate(self, view: ViewName) -> ViewName:
        if view == RESULTS and self._result is None:
            raise InvalidViewTransition("No analysis result to show yet.")
        if view not in (LANDING, UPLOAD, RESULTS):
            raise InvalidViewTransition(f"Unknown view '{view}'.")
        self._view = view
        return self._view

    def complete_analysis(self, result: AnalysisResult) -> ViewName:
        if self._view != UPLOAD:
            raise InvalidViewTransition("Results can only be shown after an upload.")
        self._result = result
        self._view = RESULTS
        return self._view

    def analyze_another(self) -> ViewName:
        if self._view != RESULTS:
            raise InvalidViewTransition("Nothing to replace; no results are shown.")
        self._result = None
        self._view = UPLOAD
        return self._view


class ViewSessionStore:
    def __init__(self, max_sessions: int = 1000):
        self._max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, ViewController] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ViewController:
        with self._lock:
            controller = self._sessions.get(session_id)
            if controller is None:
                controller = ViewController()
                self._sessions[session_id] = controller
                while len(self._sessions) > self._max_sessions:
                    self._sessions.popitem(last=False)
            else:
                self._sessions.move_to_end(session_id)
            return controller

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
