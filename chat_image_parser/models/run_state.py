# chat_image_parser/models/run_state.py

import logging
from enum import Enum
from typing import List

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    CONNECTED = "connected"
    BATCHING = "batching"
    ANALYZING = "analyzing"
    AGGREGATING = "aggregating"
    CLOSING = "closing"
    DONE = "done"
    FAILED = "failed"


class RunTracker:
    """Records the state transitions of one run so they can be logged and inspected."""

    def __init__(self):
        self.history: List[RunState] = [RunState.IDLE]

    @property
    def state(self) -> RunState:
        return self.history[-1]

    @property
    def failed(self) -> bool:
        return RunState.FAILED in self.history

    def enter(self, state: RunState):
        # Only real transitions are kept, so a long run of images stays one entry.
        if state is self.state:
            return
        logger.debug("Run state: %s -> %s", self.state.value, state.value)
        self.history.append(state)
