from tender_api.models.user import User
from tender_api.models.organization import Organization, OrganizationResponsible
from tender_api.models.tender import Tender
from tender_api.models.tender_version import TenderVersion
from tender_api.models.bid import Bid
from tender_api.models.bid_version import BidVersion
from tender_api.models.bid_feedback import BidFeedback

__all__ = [
    "User",
    "Organization",
    "OrganizationResponsible",
    "Tender",
    "TenderVersion",
    "Bid",
    "BidVersion",
    "BidFeedback",
]
