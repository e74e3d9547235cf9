"""Composite scoring of discovered drivers (lower score is better)."""

from dataclasses import dataclass
from datetime import datetime

from ride_dispatch.driver import DriverLocationSample
from ride_dispatch.geo.distance import haversine_distance_km
from ride_dispatch.ride import GeoPoint
from ride_dispatch.settings import MatchingSettings

from .discovery import DiscoveredDriver

MAX_RATING = 5.0


@dataclass(frozen=True)
class MatchCandidate:
    """A scored driver for one matching attempt; never persisted."""

    sample: DriverLocationSample
    rating: float
    distance_km: float
    age_minutes: float
    active_vehicle_count: int
    score: float

    @property
    def driver_id(self) -> str:
        return self.sample.driver_id


def score_candidate(
    distance_km: float,
    rating: float,
    age_minutes: float,
    active_vehicle_count: int,
    settings: MatchingSettings,
) -> float:
    """Weighted sum of distance, rating gap, sample age, staleness and fleet size."""
    age_minutes = max(age_minutes, 0.0)

    score = distance_km * settings.distance_weight
    score += (MAX_RATING - rating) * settings.rating_weight
    score += (age_minutes / settings.discovery_freshness_minutes) * settings.freshness_weight
    if age_minutes > settings.availability_freshness_minutes:
        score += settings.staleness_penalty
    if active_vehicle_count > 1:
        score -= settings.fleet_bonus
    return score


def rank_candidates(
    drivers: list[DiscoveredDriver],
    pickup: GeoPoint,
    now: datetime,
    settings: MatchingSettings | None = None,
) -> list[MatchCandidate]:
    """Score every discovered driver and order best first.

    The sort is stable, so equal scores keep their input order.
    """
    settings = settings or MatchingSettings()

    scored = []
    for driver in drivers:
        sample = driver.sample
        distance_km = haversine_distance_km(
            pickup.latitude, pickup.longitude, sample.latitude, sample.longitude
        )
        rating = sample.rating if sample.rating is not None else settings.default_driver_rating
        age_minutes = max(sample.age_minutes(now), 0.0)
        score = score_candidate(
            distance_km=distance_km,
            rating=rating,
            age_minutes=age_minutes,
            active_vehicle_count=driver.active_vehicle_count,
            settings=settings,
        )
        scored.append(
            MatchCandidate(
                sample=sample,
                rating=rating,
                distance_km=distance_km,
                age_minutes=age_minutes,
                active_vehicle_count=driver.active_vehicle_count,
                score=score,
            )
        )

    scored.sort(key=lambda c: c.score)
    return scored


def select_best(
    drivers: list[DiscoveredDriver],
    pickup: GeoPoint,
    now: datetime,
    settings: MatchingSettings | None = None,
) -> MatchCandidate | None:
    """Return the minimum-score candidate, or None when there are none."""
    ranked = rank_candidates(drivers, pickup, now, settings)
    return ranked[0] if ranked else None
