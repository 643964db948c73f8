# vendors/models/__init__.py

from vendors.models.payable import Payable
from vendors.models.service_template import VendorServiceTemplate
from vendors.models.vendor import Vendor

__all__ = [
    "Vendor",
    "Payable",
    "VendorServiceTemplate",
]
