"""State machine for per-source collection."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class SourceState(str, Enum):
    """Lifecycle of a single source during one run.

    - SOURCE_PENDING: Not yet started
    - SOURCE_FETCHING: Listing or feed request in progress
    - SOURCE_PARSING: Normalizing the payload into items
    - SOURCE_FETCHING_DETAILS: Per-item requests for ID-only listings
    - SOURCE_DONE: Completed, possibly with zero items
    - SOURCE_FAILED: Failed; contributes zero items
    """

    SOURCE_PENDING = "SOURCE_PENDING"
    SOURCE_FETCHING = "SOURCE_FETCHING"
    SOURCE_PARSING = "SOURCE_PARSING"
    SOURCE_FETCHING_DETAILS = "SOURCE_FETCHING_DETAILS"
    SOURCE_DONE = "SOURCE_DONE"
    SOURCE_FAILED = "SOURCE_FAILED"


_VALID_TRANSITIONS: dict[SourceState, set[SourceState]] = {
    SourceState.SOURCE_PENDING: {
        SourceState.SOURCE_FETCHING,
        SourceState.SOURCE_FAILED,
    },
    SourceState.SOURCE_FETCHING: {
        SourceState.SOURCE_PARSING,
        SourceState.SOURCE_FAILED,
    },
    SourceState.SOURCE_PARSING: {
        SourceState.SOURCE_FETCHING_DETAILS,
        SourceState.SOURCE_DONE,
        SourceState.SOURCE_FAILED,
    },
    SourceState.SOURCE_FETCHING_DETAILS: {
        SourceState.SOURCE_DONE,
        SourceState.SOURCE_FAILED,
    },
    SourceState.SOURCE_DONE: set(),
    SourceState.SOURCE_FAILED: set(),
}


class SourceStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        source_id: str,
        from_state: SourceState,
        to_state: SourceState,
    ) -> None:
        """Initialize the transition error."""
        self.source_id = source_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for source '{source_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class SourceStateMachine:
    """Enforces valid source transitions and logs each change."""

    def __init__(self, source_id: str, run_id: str) -> None:
        """Initialize the state machine.

        Args:
            source_id: Identifier for the source.
            run_id: Identifier for the current run.
        """
        self._source_id = source_id
        self._state = SourceState.SOURCE_PENDING
        self._log = logger.bind(
            component="collector",
            run_id=run_id,
            source_id=source_id,
        )

    @property
    def state(self) -> SourceState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (SourceState.SOURCE_DONE, SourceState.SOURCE_FAILED)

    def can_transition_to(self, target: SourceState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS[self._state]

    def transition_to(self, target: SourceState) -> None:
        """Transition to a new state.

        Raises:
            SourceStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise SourceStateTransitionError(self._source_id, self._state, target)

        old_state = self._state
        self._state = target
        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_fetching(self) -> None:
        """Transition to SOURCE_FETCHING state."""
        self.transition_to(SourceState.SOURCE_FETCHING)

    def to_parsing(self) -> None:
        """Transition to SOURCE_PARSING state."""
        self.transition_to(SourceState.SOURCE_PARSING)

    def to_fetching_details(self) -> None:
        """Transition to SOURCE_FETCHING_DETAILS state."""
        self.transition_to(SourceState.SOURCE_FETCHING_DETAILS)

    def to_done(self) -> None:
        """Transition to SOURCE_DONE state."""
        self.transition_to(SourceState.SOURCE_DONE)

    def to_failed(self) -> None:
        """Transition to SOURCE_FAILED state, unless already terminal."""
        if not self.is_terminal:
            self.transition_to(SourceState.SOURCE_FAILED)
