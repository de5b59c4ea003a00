"""Crowd review scenario: many voters rating seeded listings concurrently."""

import logging
import random
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from estate_map.config import EstateMapConfig
from estate_map.exceptions import (
    DuplicateVoteError,
    PropertyNotFoundError,
    TransactionConflictError,
)
from estate_map.generators import PropertyGenerator, UserGenerator
from estate_map.models import Property, User, VoteType
from estate_map.services import (
    EventSink,
    ListingService,
    PropertyReadModel,
    UserDirectory,
    VoteCoordinator,
)
from estate_map.store import DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class CrowdReviewSummary:
    """Counts of what happened while the crowd voted."""

    votes_cast: int = 0
    duplicates_rejected: int = 0
    missing_properties: int = 0
    conflicts: int = 0
    eliminated: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "votes_cast": self.votes_cast,
            "duplicates_rejected": self.duplicates_rejected,
            "missing_properties": self.missing_properties,
            "conflicts": self.conflicts,
            "eliminated": len(self.eliminated),
        }


class CrowdReviewScenario:
    """Seed listings and voters, then let the voters review concurrently.

    This scenario creates:
    - Listings scattered over a city area
    - Voters registered through the user directory
    - Votes cast from a thread pool, with a share of listings marked as
      overpriced so that disputes pile up and some get eliminated
    """

    def __init__(
        self,
        num_properties: int = 50,
        num_voters: int = 20,
        votes_per_voter: int = 10,
        overpriced_rate: float = 0.1,
        max_workers: int = 8,
        seed: int | None = None,
        config: EstateMapConfig | None = None,
        events: EventSink | None = None,
    ) -> None:
        """Initialize crowd review scenario.

        Parameters
        ----------
        num_properties : int
            Number of listings to seed.
        num_voters : int
            Number of voters to register.
        votes_per_voter : int
            Listings each voter reviews (capped at ``num_properties``).
        overpriced_rate : float
            Share of listings the crowd disputes (0.0 to 1.0).
        max_workers : int
            Threads casting votes concurrently.
        seed : int | None
            Random seed for reproducibility.
        config : EstateMapConfig | None
            Reliability and store settings.
        events : EventSink | None
            Sink receiving listing and vote events.
        """
        self.num_properties = num_properties
        self.num_voters = num_voters
        self.votes_per_voter = min(votes_per_voter, num_properties)
        self.overpriced_rate = overpriced_rate
        self.max_workers = max_workers
        self.seed = seed
        self.config = config or EstateMapConfig(seed=seed)

        if seed is not None:
            random.seed(seed)

        self.store = DocumentStore()
        self.listings = ListingService(self.store, self.config, events)
        self.read_model = PropertyReadModel(self.store)
        self.users = UserDirectory(self.store, self.config)
        self.coordinator = VoteCoordinator(self.store, self.config, events)

        self._property_gen = PropertyGenerator(seed=seed, initial_reliability=self.config.reliability.initial)
        self._user_gen = UserGenerator(seed=seed)
        self._overpriced: set[str] = set()

    def seed_data(self) -> tuple[list[Property], list[User]]:
        """Store listings and register voters."""
        properties = list(self._property_gen.generate_batch(self.num_properties))
        for prop in properties:
            self.listings.add(prop)

        overpriced_count = int(len(properties) * self.overpriced_rate)
        self._overpriced = {p.property_id for p in random.sample(properties, overpriced_count)}

        voters = [self.users.sign_in(profile) for profile in self._user_gen.generate_batch(self.num_voters)]

        logger.info(
            "Seeded %d listings (%d overpriced) and %d voters",
            len(properties),
            len(self._overpriced),
            len(voters),
        )
        return properties, voters

    def run(self) -> CrowdReviewSummary:
        """Seed data and cast every planned vote from the thread pool.

        Returns
        -------
        CrowdReviewSummary
            Outcome counts; rejected votes are counted, not raised.
        """
        properties, voters = self.seed_data()
        plan = [
            (voter.user_id, prop.property_id, self._pick_vote(prop.property_id))
            for voter in voters
            for prop in random.sample(properties, self.votes_per_voter)
        ]

        summary = CrowdReviewSummary()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.coordinator.add_vote, voter_id, property_id, vote_type): property_id
                for voter_id, property_id, vote_type in plan
            }
            for future in as_completed(futures):
                try:
                    result = future.result()
                except DuplicateVoteError:
                    summary.duplicates_rejected += 1
                    continue
                except PropertyNotFoundError:
                    # Listing was eliminated by an earlier vote in the plan
                    summary.missing_properties += 1
                    continue
                except TransactionConflictError:
                    summary.conflicts += 1
                    continue
                if result.eliminated:
                    summary.eliminated.append(result.property_id)
                else:
                    summary.votes_cast += 1

        logger.info("Crowd review complete: %s", summary.to_dict())
        return summary

    def _pick_vote(self, property_id: str) -> VoteType:
        if property_id in self._overpriced:
            return random.choices([VoteType.LOWER, VoteType.EQUAL], weights=[0.95, 0.05], k=1)[0]
        return random.choices(
            [VoteType.EQUAL, VoteType.LOWER, VoteType.HIGHER], weights=[0.7, 0.15, 0.15], k=1
        )[0]

    def export(self, sinks: list[Any]) -> None:
        """Export the surviving listings to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (JsonFileSink, KafkaSink, etc.).
        """
        listings = self.read_model.query().data
        for sink in sinks:
            sink.write_batch("properties", listings)

        logger.info("Exported %d listings to %d sinks", len(listings), len(sinks))
