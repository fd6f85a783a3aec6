"""Typed vs pasted classification of edit transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from writerstats.words import count_words

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    TYPED = "typed"
    PASTED = "pasted"


@dataclass(frozen=True)
class Change:
    """Text inserted by one change record. Deletions carry empty text."""

    kind: ChangeKind
    text: str = ""

    @classmethod
    def typed(cls, text: str) -> Change:
        return cls(ChangeKind.TYPED, text)

    @classmethod
    def pasted(cls, text: str) -> Change:
        return cls(ChangeKind.PASTED, text)


@dataclass
class EditTransaction:
    changes: list[Change] = field(default_factory=list)
    doc_changed: bool = True


@dataclass(frozen=True)
class WordDelta:
    typed: int = 0
    pasted: int = 0

    def __bool__(self) -> bool:
        return self.typed > 0 or self.pasted > 0

    def __add__(self, other: WordDelta) -> WordDelta:
        return WordDelta(self.typed + other.typed, self.pasted + other.pasted)


def classify(changes: Iterable[Change]) -> WordDelta:
    """Sum words per kind across *changes*.

    Each record is classified on its own, so a multi-cursor edit that both
    types and pastes contributes to both counters.
    """
    typed = 0
    pasted = 0
    for change in changes:
        if not change.text:
            continue
        words = count_words(change.text)
        if change.kind is ChangeKind.PASTED:
            pasted += words
        else:
            typed += words
    return WordDelta(typed=typed, pasted=pasted)


def classify_transactions(transactions: Iterable[EditTransaction]) -> WordDelta:
    """Classify a batch of transactions, ignoring ones that left the document unchanged."""
    total = WordDelta()
    for transaction in transactions:
        if not transaction.doc_changed:
            continue
        total = total + classify(transaction.changes)
    if total:
        logger.debug("Classified %d typed / %d pasted words", total.typed, total.pasted)
    return total
