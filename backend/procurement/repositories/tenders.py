from procurement.errors import TENDER_NOT_FOUND
from procurement.models.tender import Tender, TenderHistory, TENDER_VERSIONED_FIELDS
from procurement.repositories.versioned import VersionedStore

tender_store = VersionedStore(Tender, TenderHistory, TENDER_VERSIONED_FIELDS, TENDER_NOT_FOUND)
