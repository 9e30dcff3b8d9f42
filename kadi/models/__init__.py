from kadi.models.tenant import Tenant
from kadi.models.user import User
from kadi.models.profile import Profile, PROFILE_OPTIONAL_FIELDS
from kadi.models.client import Client
from kadi.models.catalog_item import CatalogItem, CatalogItemType
from kadi.models.invoice import Invoice, InvoiceStatus
