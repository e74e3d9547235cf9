"""Driver discovery, scoring, and ride matching."""

from .discovery import CandidateDiscovery, DiscoveredDriver
from .matching_server import (
    MATCHING_FAILED,
    NO_DRIVERS_AVAILABLE,
    REQUEST_NOT_FOUND,
    REQUEST_NOT_PENDING,
    MatchingServer,
    MatchResult,
)
from .notification_dispatch import NotificationDispatch
from .offer_claims import OfferClaims
from .scoring import MatchCandidate, rank_candidates, score_candidate, select_best

__all__ = [
    "CandidateDiscovery",
    "DiscoveredDriver",
    "MatchCandidate",
    "score_candidate",
    "rank_candidates",
    "select_best",
    "NotificationDispatch",
    "OfferClaims",
    "MatchingServer",
    "MatchResult",
    "NO_DRIVERS_AVAILABLE",
    "MATCHING_FAILED",
    "REQUEST_NOT_FOUND",
    "REQUEST_NOT_PENDING",
]
