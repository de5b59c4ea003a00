"""Document storage for listings, votes and users."""

from estate_map.store.document import DocumentStore, Session
from estate_map.store.votes import PROPERTIES, VoteRecordStore

__all__ = ["DocumentStore", "PROPERTIES", "Session", "VoteRecordStore"]
