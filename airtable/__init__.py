# Airtable module - REST client for a single base
# Request builders, one-shot send, record envelope models

from .client import AirtableClient, AirtableRequest, filter_by_formula
from .models import AirtablePayload, AirtableRecord

__all__ = [
    "AirtableClient",
    "AirtableRequest",
    "AirtablePayload",
    "AirtableRecord",
    "filter_by_formula",
]
