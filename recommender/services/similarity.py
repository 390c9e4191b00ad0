"""
Similarity Finder

Finds near-duplicate or related tickets by Jaccard similarity between the
input's keyword set and each historical ticket title's keyword set.
"""
from typing import List, Optional, Iterable

from recommender.config import get_settings
from recommender.models.schemas import SimilarTicketMatch, TicketQuery, TicketRecord
from recommender.utils.keywords import extract_keywords, join_text
from recommender.utils.logger import get_logger
from recommender.utils.rounding import round_half_up

logger = get_logger(__name__)
settings = get_settings()

MIN_SIMILARITY = 0.1


def jaccard(left: set, right: set) -> float:
    """|A ∩ B| / |A ∪ B|, 0.0 for two empty sets"""
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def match_similar(
    tickets: Iterable[TicketRecord],
    input_keywords: set,
    exclude_id: Optional[str] = None,
    limit: int = 5
) -> List[SimilarTicketMatch]:
    """
    Rank tickets by keyword similarity

    Args:
        tickets: Candidate tickets
        input_keywords: Keyword set of the query text
        exclude_id: Ticket ID to leave out (usually the ticket being viewed)
        limit: Maximum number of matches

    Returns:
        Matches with similarity >= MIN_SIMILARITY, most similar first
    """
    matches: List[SimilarTicketMatch] = []

    for ticket in tickets:
        if exclude_id and ticket.id == exclude_id:
            continue

        ticket_keywords = extract_keywords(ticket.title)
        matching_terms = input_keywords & ticket_keywords
        if not matching_terms:
            continue

        similarity = jaccard(input_keywords, ticket_keywords)
        if similarity < MIN_SIMILARITY:
            continue

        matches.append(SimilarTicketMatch(
            ticket_id=ticket.id,
            custom_id=ticket.custom_id,
            title=ticket.title,
            status=ticket.status,
            similarity=round_half_up(similarity, 2),
            matching_terms=sorted(matching_terms)
        ))

    matches.sort(key=lambda match: match.similarity, reverse=True)
    return matches[:limit]


async def find_similar(
    repository,
    workspace_id: str,
    title: str,
    description: Optional[str] = None,
    exclude_id: Optional[str] = None,
    limit: int = 5
) -> List[SimilarTicketMatch]:
    """
    Find tickets similar to the given text in a workspace

    Text without keywords returns an empty list without reading the store.
    """
    input_keywords = extract_keywords(join_text(title, description))
    if not input_keywords:
        logger.debug("No keywords in query for workspace %s, skipping search", workspace_id)
        return []

    tickets = await repository.list_tickets_async(
        workspace_id,
        TicketQuery(limit=settings.similarity_history_limit)
    )
    matches = match_similar(tickets, input_keywords, exclude_id, limit)
    logger.info(
        "Found %d similar tickets for workspace %s among %d candidates",
        len(matches), workspace_id, len(tickets)
    )
    return matches
