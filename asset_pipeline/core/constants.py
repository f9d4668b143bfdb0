"""
Asset domain constants.

Canonical asset fields use camelCase keys, matching the mapped data that
is staged and shown to operators.
"""

from types import MappingProxyType

VALID_ASSET_STATUSES = (
    "ACTIVE",
    "INACTIVE",
    "MAINTENANCE",
    "DISPOSED",
    "PENDING",
    "RESERVED",
    "RETIRED",
)

VALID_ASSET_CONDITIONS = (
    "NEW",
    "EXCELLENT",
    "GOOD",
    "FAIR",
    "POOR",
    "BROKEN",
    "UNKNOWN",
)

DEFAULT_STATUS = "ACTIVE"
DEFAULT_CONDITION = "GOOD"

# First data row sits on line 2, under the header
HEADER_ROW_OFFSET = 2

CANONICAL_ASSET_FIELDS = (
    "assetTag",
    "name",
    "description",
    "manufacturer",
    "modelNumber",
    "serialNumber",
    "status",
    "condition",
    "buildingName",
    "floor",
    "room",
    "location",
    "purchaseDate",
    "purchasePrice",
    "warrantyExpiration",
    "notes",
)

REQUIRED_ASSET_FIELDS = ("assetTag", "name")
DATE_FIELDS = ("purchaseDate", "warrantyExpiration")
NUMERIC_FIELDS = ("purchasePrice",)

ENUM_FIELDS = MappingProxyType({
    "status": VALID_ASSET_STATUSES,
    "condition": VALID_ASSET_CONDITIONS,
})

FIELD_DEFAULTS = MappingProxyType({
    "status": DEFAULT_STATUS,
    "condition": DEFAULT_CONDITION,
})

FIELD_MAX_LENGTHS = MappingProxyType({
    "assetTag": 50,
    "name": 200,
})
MAX_FIELD_LENGTH = 255

FIELD_LABELS = MappingProxyType({
    "assetTag": "Asset Tag",
    "name": "Name",
    "description": "Description",
    "manufacturer": "Manufacturer",
    "modelNumber": "Model Number",
    "serialNumber": "Serial Number",
    "status": "Status",
    "condition": "Condition",
    "buildingName": "Building",
    "floor": "Floor",
    "room": "Room",
    "location": "Location",
    "purchaseDate": "Purchase Date",
    "purchasePrice": "Purchase Price",
    "warrantyExpiration": "Warranty Expiration",
    "notes": "Notes",
})

# (csv alias, asset field, confidence)
DEFAULT_COLUMN_ALIASES = (
    ("Asset Tag", "assetTag", 100),
    ("Asset ID", "assetTag", 95),
    ("Tag", "assetTag", 80),
    ("ID", "assetTag", 60),
    ("Asset Name", "name", 100),
    ("Name", "name", 95),
    ("Description", "description", 100),
    ("Manufacturer", "manufacturer", 100),
    ("Model Number", "modelNumber", 100),
    ("Model", "modelNumber", 90),
    ("Serial Number", "serialNumber", 100),
    ("Serial", "serialNumber", 90),
    ("Status", "status", 100),
    ("Condition", "condition", 100),
    ("Condition Assessment", "condition", 95),
    ("Building", "buildingName", 95),
    ("Building Name", "buildingName", 100),
    ("Floor", "floor", 100),
    ("Room", "room", 100),
    ("Location", "location", 100),
    ("Purchase Date", "purchaseDate", 100),
    ("Purchase Price", "purchasePrice", 100),
    ("Purchase Cost", "purchasePrice", 95),
    ("Warranty Expiration", "warrantyExpiration", 100),
    ("Warranty Expiry", "warrantyExpiration", 95),
    ("Notes", "notes", 100),
)


def field_label(field: str) -> str:
    """Human-readable label for a canonical field (falls back to the key)."""
    return FIELD_LABELS.get(field, field)


def missing_field_message(field: str) -> str:
    return f"Missing required field: {field_label(field)}"
