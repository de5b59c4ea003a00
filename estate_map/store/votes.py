"""Vote records embedded in property documents."""

from estate_map.exceptions import DuplicateVoteError, PropertyNotFoundError, VoteNotFoundError
from estate_map.models import Vote
from estate_map.store.document import Session

PROPERTIES = "properties"


class VoteRecordStore:
    """Per-property vote sets, read and staged through one session.

    Votes live in the ``votes`` array of their property document, so every
    vote write also bumps that document's version. Two transactions touching
    the same property therefore always conflict at commit.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find(self, property_id: str, voter_id: str) -> Vote | None:
        """Return the voter's vote on the property, or None."""
        doc = self._load(property_id)
        for raw in doc.get("votes", []):
            if raw["voter_id"] == voter_id:
                return Vote.from_document(raw)
        return None

    def insert(self, property_id: str, vote: Vote) -> None:
        """Add a vote; a voter may hold only one vote per property."""
        doc = self._load(property_id)
        votes = doc.setdefault("votes", [])
        if any(raw["voter_id"] == vote.voter_id for raw in votes):
            raise DuplicateVoteError(
                f"User {vote.voter_id} already voted for property {property_id}"
            )
        votes.append(vote.to_document())
        self._session.put(PROPERTIES, property_id, doc)

    def remove(self, property_id: str, voter_id: str) -> Vote:
        """Remove and return the voter's vote."""
        doc = self._load(property_id)
        votes = doc.get("votes", [])
        for index, raw in enumerate(votes):
            if raw["voter_id"] == voter_id:
                del votes[index]
                self._session.put(PROPERTIES, property_id, doc)
                return Vote.from_document(raw)
        raise VoteNotFoundError(f"Vote by {voter_id} on property {property_id} not found")

    def _load(self, property_id: str) -> dict:
        doc = self._session.get(PROPERTIES, property_id)
        if doc is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return doc
