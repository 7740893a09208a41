from procurement.models.organization import Employee, Organization, OrganizationResponsible
from procurement.models.tender import Tender, TenderHistory
from procurement.models.bid import Bid, BidHistory
from procurement.models.bid_decision import BidDecisionEvent
from procurement.models.review import Review

__all__ = [
    "Employee",
    "Organization",
    "OrganizationResponsible",
    "Tender",
    "TenderHistory",
    "Bid",
    "BidHistory",
    "BidDecisionEvent",
    "Review",
]
