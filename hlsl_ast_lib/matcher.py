"""
Declaration Matching

Several declarations can start on the same source line
(``float4 _A, _B;``). The edited line is compared against each candidate's
dump header and the candidate sharing the most tokens wins.
"""

import logging
from typing import List, Sequence

from .model import AstNode, MatchOutcome, MatchResult

logger = logging.getLogger(__name__)

_PUNCTUATION = ";,"


def line_tokens(line: str) -> List[str]:
    """
    Distinct whitespace-delimited tokens, first occurrence order.

    Declaration punctuation (``_A,`` ``_B;``) is trimmed so names can match.
    """
    seen = []
    for token in line.split():
        token = token.strip(_PUNCTUATION)
        if token and token not in seen:
            seen.append(token)
    return seen


def score(node: AstNode, tokens: Sequence[str]) -> int:
    """Number of tokens that occur verbatim in the node header."""
    return sum(1 for t in tokens if t in node.header)


def select_declaration(candidates: Sequence[AstNode], line: str) -> MatchResult:
    """
    Pick the candidate with the highest score; ties go to the earliest one.

    A zero best score among several candidates is AMBIGUOUS so the caller can
    fall back to reading the line as plain text instead of guessing.
    """
    if not candidates:
        return MatchResult(MatchOutcome.NO_CANDIDATES)

    tokens = line_tokens(line)
    best = candidates[0]
    best_score = score(best, tokens)
    for node in candidates[1:]:
        s = score(node, tokens)
        if s > best_score:
            best, best_score = node, s

    if best_score == 0 and len(candidates) > 1:
        logger.debug(f"{len(candidates)} candidates on line, none matching {line.strip()!r}")
        return MatchResult(MatchOutcome.AMBIGUOUS)

    return MatchResult(MatchOutcome.MATCHED, node=best, score=best_score)
