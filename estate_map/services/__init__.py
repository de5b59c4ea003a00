"""Application services over the document store."""

from estate_map.services.events import EventPublisher, EventSink, build_event
from estate_map.services.listings import ListingQueryResult, ListingService, PropertyReadModel
from estate_map.services.users import UserDirectory
from estate_map.services.validation import validate_property
from estate_map.services.votes import VoteCoordinator, VoteResult, parse_vote_type

__all__ = [
    "EventPublisher",
    "EventSink",
    "ListingQueryResult",
    "ListingService",
    "PropertyReadModel",
    "UserDirectory",
    "VoteCoordinator",
    "VoteResult",
    "build_event",
    "parse_vote_type",
    "validate_property",
]
