"""
Keyword extraction for ticket text

Normalizes free text into a set of candidate keywords:
- lower-cases and replaces punctuation with spaces
- drops tokens shorter than MIN_KEYWORD_LENGTH
- drops Russian and English stop words
"""
import re
from typing import Optional, Set

MIN_KEYWORD_LENGTH = 3

# Anything that is not a Latin/Cyrillic letter, digit or whitespace
_NON_WORD_RE = re.compile(r"[^a-z0-9а-яё\s]")

STOP_WORDS = frozenset([
    # Russian
    "и", "в", "на", "с", "по", "для", "не", "что", "это", "как", "от", "а",
    "к", "о", "из", "у", "за", "но", "так", "все", "при", "да", "же", "до",
    "то", "ли", "бы",
    # English
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "and", "or",
    "but", "if", "then", "else", "when", "where", "why", "how", "all", "each",
    "every", "both", "few", "more", "most", "other", "some", "such", "no",
    "nor", "not", "only", "own", "same", "so", "than", "too", "very", "to",
    "of", "in", "for", "on", "with", "at", "by", "from", "up", "about",
    "into", "through", "during", "before", "after", "above", "below",
    "between", "under", "again", "further", "once",
])


def extract_keywords(text: Optional[str]) -> Set[str]:
    """
    Extract the keyword set of a piece of text

    Args:
        text: Free text (title, description or both joined by a space)

    Returns:
        Deduplicated set of keywords, empty for empty or punctuation-only text
    """
    if not text:
        return set()

    normalized = _NON_WORD_RE.sub(" ", text.lower())
    return {
        word for word in normalized.split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    }


def join_text(title: Optional[str], description: Optional[str] = None) -> str:
    """Join title and optional description the way every scorer reads them"""
    return f"{title or ''} {description or ''}"
