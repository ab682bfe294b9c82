"""
Workflow types and the kit assignment state machine
(``kitstock_kernel.domain.workflow``).

Pure value objects, ZERO I/O.  No imports from ``db/``, ``services/`` or
``selectors/``.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions, so nothing re-enters
  ``pending`` once an assignment has left it.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitstock_kernel.domain.values import AssignmentStatus


@dataclass(frozen=True)
class Guard:
    """A condition that must hold before a transition fires (descriptive only)."""

    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition.

    ``stock_delta_sign`` says what the transition does to the committed kit
    stock: 0 leaves it alone, +1 releases the assignment quantity back.
    """

    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None
    stock_delta_sign: int = 0


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle."""

    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"Workflow {self.name}: initial state '{self.initial_state}' not in states"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Workflow {self.name}: transition {t.action} references unknown state"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"Workflow {self.name}: terminal state '{t.from_state}' has an outgoing edge"
                )

    def find_transition(self, from_state: str, to_state: str) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.to_state == to_state:
                return t
        return None

    def allowed_targets(self, from_state: str) -> tuple[str, ...]:
        return tuple(t.to_state for t in self.transitions if t.from_state == from_state)


ASSIGNMENT_IS_PENDING = Guard(
    name="assignment_is_pending",
    description="Only pending assignments can be fulfilled or withdrawn",
)

ASSIGNMENT_WORKFLOW = Workflow(
    name="kit_assignment",
    description="Commitment of kit stock to a client through delivery",
    initial_state=AssignmentStatus.PENDING.value,
    states=(
        AssignmentStatus.PENDING.value,
        AssignmentStatus.DELIVERED.value,
        AssignmentStatus.CANCELLED.value,
    ),
    transitions=(
        Transition(
            from_state=AssignmentStatus.PENDING.value,
            to_state=AssignmentStatus.DELIVERED.value,
            action="deliver",
            guard=ASSIGNMENT_IS_PENDING,
        ),
        Transition(
            from_state=AssignmentStatus.PENDING.value,
            to_state=AssignmentStatus.CANCELLED.value,
            action="cancel",
            guard=ASSIGNMENT_IS_PENDING,
            stock_delta_sign=+1,
        ),
    ),
    terminal_states=(
        AssignmentStatus.DELIVERED.value,
        AssignmentStatus.CANCELLED.value,
    ),
)
