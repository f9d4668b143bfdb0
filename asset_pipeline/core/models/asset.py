"""
Asset model: the canonical record written to the asset store on approval.
"""

from datetime import date
from decimal import Decimal

from pydantic import Field

from asset_pipeline.core.constants import DEFAULT_CONDITION, DEFAULT_STATUS

from .base import CamelModel


class Asset(CamelModel):
    """
    A physical asset keyed by its asset tag.

    Built from a staged row's mapped data, whose keys are the camelCase
    aliases of these attributes.
    """

    asset_tag: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    manufacturer: str | None = None
    model_number: str | None = None
    serial_number: str | None = None
    status: str = DEFAULT_STATUS
    condition: str = DEFAULT_CONDITION
    building_name: str | None = None
    floor: str | None = None
    room: str | None = None
    location: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None
    warranty_expiration: date | None = None
    notes: str | None = None

    @classmethod
    def from_mapped_data(cls, mapped: dict[str, str]) -> "Asset":
        """
        Build an Asset from staged mapped data.

        Blank values are dropped so defaults apply (status ACTIVE,
        condition GOOD).

        Raises:
            pydantic.ValidationError: If the data violates asset constraints
        """
        values = {k: v.strip() for k, v in mapped.items() if v is not None and v.strip()}
        return cls.model_validate(values)
