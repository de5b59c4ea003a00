"""Vote transaction coordinator."""

import logging
from dataclasses import dataclass
from datetime import datetime

from estate_map.config import EstateMapConfig
from estate_map.exceptions import DuplicateVoteError, PropertyNotFoundError, ValidationError
from estate_map.logging import bind
from estate_map.models import Vote, VoteType
from estate_map.reliability import is_directional, next_reliability
from estate_map.services.events import EventPublisher, EventSink
from estate_map.store import PROPERTIES, DocumentStore, Session, VoteRecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a committed vote operation, used by the map to re-render."""

    property_id: str
    reliability: float
    review_count: int
    eliminated: bool = False


class VoteCoordinator:
    """Sole writer of a property's votes, reliability and review count.

    All three fields change together in one store transaction, or not at
    all. Callers pass an already authenticated voter id.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: EstateMapConfig | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.store = store
        self.config = config or EstateMapConfig()
        self._events = EventPublisher(events, f"{self.config.output.topic_prefix}.property-events")

    def add_vote(self, voter_id: str, property_id: str, vote_type: VoteType | str) -> VoteResult:
        """Record a vote and move the property's reliability.

        A directional vote on a property whose reliability is already at or
        below the elimination threshold deletes the property instead.

        Raises
        ------
        ValidationError
            Malformed ids or vote type.
        PropertyNotFoundError
            Property does not exist.
        DuplicateVoteError
            The voter already voted on this property.
        TransactionConflictError
            Concurrent writers kept winning until retries ran out.
        """
        _require_ids(voter_id, property_id)
        vote_type = parse_vote_type(vote_type)
        reliability_cfg = self.config.reliability

        def unit_of_work(session: Session) -> VoteResult:
            doc = _load_property(session, property_id)
            votes = VoteRecordStore(session)
            if votes.find(property_id, voter_id) is not None:
                raise DuplicateVoteError(
                    f"User {voter_id} already voted for property {property_id}"
                )

            current = float(doc["reliability"])
            if is_directional(vote_type) and current <= reliability_cfg.elimination_threshold:
                session.delete(PROPERTIES, property_id)
                return VoteResult(property_id, current, int(doc["review_count"]), eliminated=True)

            now = datetime.now()
            votes.insert(property_id, Vote(voter_id=voter_id, vote_type=vote_type, voted_at=now))
            doc = _load_property(session, property_id)
            doc["reliability"] = next_reliability(current, vote_type, step=reliability_cfg.step)
            doc["review_count"] = int(doc["review_count"]) + 1
            doc["updated_at"] = now.isoformat()
            session.put(PROPERTIES, property_id, doc)
            return VoteResult(property_id, doc["reliability"], doc["review_count"])

        result = self.store.run_transaction(
            unit_of_work, max_retries=self.config.store.max_transaction_retries
        )

        log = bind(logger, property_id=property_id, voter_id=voter_id, vote_type=vote_type.value)
        if result.eliminated:
            log.info("Property %s eliminated at reliability %.1f", property_id, result.reliability)
            self._events.publish(
                "property.eliminated",
                property_id,
                {"voter_id": voter_id, "vote_type": vote_type.value, "reliability": result.reliability},
            )
        else:
            log.debug("Vote added: reliability=%.1f reviews=%d", result.reliability, result.review_count)
            self._events.publish(
                "vote.added",
                property_id,
                {
                    "voter_id": voter_id,
                    "vote_type": vote_type.value,
                    "reliability": result.reliability,
                    "review_count": result.review_count,
                },
            )
        return result

    def remove_vote(self, voter_id: str, property_id: str) -> VoteResult:
        """Withdraw the voter's vote and undo its reliability push.

        Raises
        ------
        PropertyNotFoundError
            Property does not exist.
        VoteNotFoundError
            The voter has no vote on this property.
        """
        _require_ids(voter_id, property_id)
        step = self.config.reliability.step

        def unit_of_work(session: Session) -> tuple[VoteResult, Vote]:
            _load_property(session, property_id)
            removed = VoteRecordStore(session).remove(property_id, voter_id)
            doc = _load_property(session, property_id)
            doc["reliability"] = next_reliability(
                float(doc["reliability"]), removed.vote_type, is_removal=True, step=step
            )
            doc["review_count"] = max(0, int(doc["review_count"]) - 1)
            doc["updated_at"] = datetime.now().isoformat()
            session.put(PROPERTIES, property_id, doc)
            return VoteResult(property_id, doc["reliability"], doc["review_count"]), removed

        result, removed = self.store.run_transaction(
            unit_of_work, max_retries=self.config.store.max_transaction_retries
        )
        bind(logger, property_id=property_id, voter_id=voter_id, vote_type=removed.vote_type.value).debug(
            "Vote withdrawn: reliability=%.1f reviews=%d", result.reliability, result.review_count
        )
        self._events.publish(
            "vote.removed",
            property_id,
            {
                "voter_id": voter_id,
                "vote_type": removed.vote_type.value,
                "reliability": result.reliability,
                "review_count": result.review_count,
            },
        )
        return result

    def get_user_vote(self, voter_id: str, property_id: str) -> Vote | None:
        """Return the voter's vote on the property, or None."""
        _require_ids(voter_id, property_id)
        session = self.store.session()
        try:
            return VoteRecordStore(session).find(property_id, voter_id)
        finally:
            session.abort()


def parse_vote_type(value: VoteType | str) -> VoteType:
    """Parse a vote type, rejecting anything outside lower/equal/higher."""
    if isinstance(value, VoteType):
        return value
    try:
        return VoteType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(v.value for v in VoteType)
        raise ValidationError(f"Invalid vote type {value!r}; expected one of: {allowed}") from None


def _require_ids(voter_id: str, property_id: str) -> None:
    errors = []
    if not isinstance(voter_id, str) or not voter_id.strip():
        errors.append("voter id is required")
    if not isinstance(property_id, str) or not property_id.strip():
        errors.append("property id is required")
    if errors:
        raise ValidationError("Invalid vote request", errors)


def _load_property(session: Session, property_id: str) -> dict:
    doc = session.get(PROPERTIES, property_id)
    if doc is None:
        raise PropertyNotFoundError(f"Property {property_id} not found")
    return doc
