# Import every model so relationship() targets resolve wherever one is used
from badgemint.models.badges import Badge, MetadataStatus
from badgemint.models.events import Event
from badgemint.models.whitelist import ClaimMethod, EventClaimMethod, WhitelistEntry

__all__ = ["Badge", "ClaimMethod", "Event", "EventClaimMethod", "MetadataStatus", "WhitelistEntry"]
