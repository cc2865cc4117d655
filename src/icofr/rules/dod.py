"""Degree of Deficiency (DoD) decision procedure.

Six yes/no boxes and a terminal RESULT state, traversed one answer at a
time from box 1. Routing is a static table; no box is visited twice.

    box | No     | Yes
    ----+--------+-------
     1  | 4      | 2        assertion link
     2  | 4      | 3        likelihood
     3  | 4      | 5        magnitude
     5  | 6      | 4        compensating control
     4  | RESULT | 6        oversight attention
     6  | RESULT | RESULT   prudent official

Classification once RESULT is reached:
    box 4 answered No   -> Control Deficiency
    box 6 answered Yes  -> Material Weakness
    otherwise           -> Significant Deficiency

A traversal is an immutable value. Abandoning it needs no cleanup; reset
just starts a new one at box 1.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from icofr.models.shared import DeficiencySeverity
from icofr.utils.error_handler import (
    IncompleteTraversalError,
    InvalidEnumError,
    TraversalError,
)


class DoDNode(Enum):
    """Decision boxes of the DoD flowchart plus the terminal state."""
    ASSERTION_LINK = 1
    LIKELIHOOD = 2
    MAGNITUDE = 3
    OVERSIGHT_ATTENTION = 4
    COMPENSATING_CONTROL = 5
    PRUDENT_OFFICIAL = 6
    RESULT = "RESULT"

    @property
    def is_terminal(self) -> bool:
        return self is DoDNode.RESULT


# node -> (next on No, next on Yes)
TRANSITIONS: dict[DoDNode, tuple[DoDNode, DoDNode]] = {
    DoDNode.ASSERTION_LINK: (DoDNode.OVERSIGHT_ATTENTION, DoDNode.LIKELIHOOD),
    DoDNode.LIKELIHOOD: (DoDNode.OVERSIGHT_ATTENTION, DoDNode.MAGNITUDE),
    DoDNode.MAGNITUDE: (DoDNode.OVERSIGHT_ATTENTION, DoDNode.COMPENSATING_CONTROL),
    DoDNode.COMPENSATING_CONTROL: (DoDNode.PRUDENT_OFFICIAL, DoDNode.OVERSIGHT_ATTENTION),
    DoDNode.OVERSIGHT_ATTENTION: (DoDNode.RESULT, DoDNode.PRUDENT_OFFICIAL),
    DoDNode.PRUDENT_OFFICIAL: (DoDNode.RESULT, DoDNode.RESULT),
}

QUESTIONS: dict[DoDNode, tuple[str, str]] = {
    DoDNode.ASSERTION_LINK: (
        "Box 1: Assertion Link",
        "Does the deficiency relate directly to achieving one or more financial statement assertions?",
    ),
    DoDNode.LIKELIHOOD: (
        "Box 2: Likelihood",
        "Is there a reasonable possibility that a misstatement results from the deficiency "
        "(or combination of deficiencies)?",
    ),
    DoDNode.MAGNITUDE: (
        "Box 3: Magnitude",
        "Could the magnitude of the potential misstatement be material?",
    ),
    DoDNode.OVERSIGHT_ATTENTION: (
        "Box 4: Oversight Attention",
        "Is the deficiency important enough to merit the attention of those charged with "
        "oversight (Audit Committee / Board of Directors)?",
    ),
    DoDNode.COMPENSATING_CONTROL: (
        "Box 5: Compensating Control",
        "Is there a control operating effectively at a level of precision sufficient to "
        "prevent or detect a material misstatement?",
    ),
    DoDNode.PRUDENT_OFFICIAL: (
        "Box 6: Prudent Official",
        "Would a knowledgeable, competent and objective individual (prudent official) "
        "conclude the deficiency is a material weakness?",
    ),
}

NodeKey = Union[DoDNode, int]


def _to_node(key: NodeKey) -> DoDNode:
    if isinstance(key, DoDNode):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        try:
            node = DoDNode(key)
        except ValueError:
            node = None
        if node is not None and not node.is_terminal:
            return node
    raise InvalidEnumError("DoD box", key, [str(n.value) for n in TRANSITIONS])


def _check_answer(answer: Any) -> bool:
    if not isinstance(answer, bool):
        raise InvalidEnumError("DoD answer", answer, ["True", "False"])
    return answer


def transition(node: DoDNode, answer: bool) -> DoDNode:
    """Next state after answering ``node``.

    Raises:
        TraversalError: ``node`` is RESULT
        InvalidEnumError: ``answer`` is not a bool
    """
    if node.is_terminal:
        raise TraversalError()
    no_next, yes_next = TRANSITIONS[node]
    return yes_next if _check_answer(answer) else no_next


def severity_from_answers(answers: Mapping[DoDNode, bool]) -> DeficiencySeverity:
    """Classification rule applied to the answers of a finished traversal."""
    if answers.get(DoDNode.OVERSIGHT_ATTENTION) is False:
        return DeficiencySeverity.CONTROL_DEFICIENCY
    if answers.get(DoDNode.PRUDENT_OFFICIAL) is True:
        return DeficiencySeverity.MATERIAL_WEAKNESS
    return DeficiencySeverity.SIGNIFICANT_DEFICIENCY


@dataclass(frozen=True)
class DoDTraversal:
    """One walk through the decision tree.

    ``answers`` keeps the (box, answer) pairs in the order they were given;
    ``aggregate`` marks an assessment of a combination of deficiencies.
    """
    node: DoDNode = DoDNode.ASSERTION_LINK
    answers: tuple[tuple[DoDNode, bool], ...] = ()
    aggregate: bool = False

    def answer(self, value: bool) -> "DoDTraversal":
        """Answer the current box and return the advanced traversal."""
        next_node = transition(self.node, value)
        return DoDTraversal(
            node=next_node,
            answers=self.answers + ((self.node, value),),
            aggregate=self.aggregate,
        )

    def reset(self) -> "DoDTraversal":
        """Discard all answers and start again at box 1."""
        return DoDTraversal(aggregate=self.aggregate)

    @property
    def is_complete(self) -> bool:
        return self.node.is_terminal

    @property
    def question(self) -> tuple[str, str] | None:
        """(title, question) for the current box, None at RESULT."""
        return QUESTIONS.get(self.node)

    @property
    def path(self) -> list[Union[int, str]]:
        """Visited states in order, e.g. [1, 2, 3, 5, 6, "RESULT"]."""
        visited = [node.value for node, _ in self.answers]
        visited.append(self.node.value)
        return visited

    def answer_map(self) -> dict[int, bool]:
        return {node.value: value for node, value in self.answers}

    def result(self) -> DeficiencySeverity:
        """Severity of the finished traversal.

        Raises:
            IncompleteTraversalError: RESULT has not been reached
        """
        if not self.is_complete:
            raise IncompleteTraversalError(self.node.value)
        return severity_from_answers(dict(self.answers))

    def to_dict(self) -> dict[str, Any]:
        return {
            "node": self.node.value,
            "path": self.path,
            "answers": self.answer_map(),
            "aggregate": self.aggregate,
            "complete": self.is_complete,
            "severity": self.result().value if self.is_complete else None,
        }


def replay(answers: Mapping[NodeKey, bool], aggregate: bool = False) -> DoDTraversal:
    """Walk the tree from box 1 using a prepared answer mapping.

    Answers for boxes that the walk never reaches are ignored.

    Raises:
        IncompleteTraversalError: a box on the path has no answer
    """
    normalized = {_to_node(key): value for key, value in answers.items()}
    traversal = DoDTraversal(aggregate=aggregate)
    while not traversal.is_complete:
        if traversal.node not in normalized:
            raise IncompleteTraversalError(traversal.node.value)
        traversal = traversal.answer(normalized[traversal.node])
    return traversal


def classify(answers: Mapping[NodeKey, bool]) -> DeficiencySeverity:
    """Severity for a complete answer mapping keyed by box number."""
    return replay(answers).result()
