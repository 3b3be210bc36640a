"""Connection clarity validator.

Scores how specific each connection label reads once revealed:

- 10: every label is specific
- 7-9: mostly clear
- 4-6: some vague labels
- 0-3: several vague or confusing labels
"""

import re
from typing import Sequence

from ..models.groups import CandidateGroup
from ..models.quality import ValidationResult
from .base import QualityValidator, round_score

VAGUE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^similar",
        r"^related to",
        r"^connected by",
        r"^have something in common",
        r"^share",
        r"^various",
        r"^different",
        r"^multiple",
    )
]

SPECIFIC_PATTERNS = [
    re.compile(r"\d{4}"),
    re.compile(r"directed by", re.IGNORECASE),
    re.compile(r"starring", re.IGNORECASE),
    re.compile(r"\d{2,4}s"),
    re.compile(r'"[^"]+"'),
]

MIN_CONNECTION_LENGTH = 10
SHORT_PENALTY = 3
VAGUE_PENALTY = 2
PASS_MARK = 6
ISSUE_MARK = 7


def score_connection(connection: str) -> float:
    """Score a single label from 0 to 10."""
    score = 10.0

    if len(connection) < MIN_CONNECTION_LENGTH:
        score -= SHORT_PENALTY

    if any(pattern.search(connection) for pattern in VAGUE_PATTERNS):
        score -= VAGUE_PENALTY

    if not connection.strip():
        score = 0.0

    if any(pattern.search(connection) for pattern in SPECIFIC_PATTERNS):
        score = min(10.0, score + 1)

    return max(0.0, score)


class ClarityValidator(QualityValidator):
    """Penalizes short or vague connection labels."""

    name = "clarity"
    weight = 0.25

    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        scores = [score_connection(group.connection) for group in groups]
        issues = [
            f'"{group.connection}" ({score:g}/10)'
            for group, score in zip(groups, scores)
            if score < ISSUE_MARK
        ]

        average = sum(scores) / len(scores) if scores else 0.0
        reason = f"Average clarity: {average:.1f}/10"
        if issues:
            reason += f". Issues: {', '.join(issues)}"

        return ValidationResult(
            score=round_score(average),
            passed=average >= PASS_MARK,
            reason=reason,
            metadata={
                "average_score": average,
                "issue_count": len(issues),
                "total_groups": len(groups),
            },
        )
