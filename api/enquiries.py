"""
api.enquiries
=============

Enquiry endpoints: creation, lookup, status counts and the gated status
update.
"""

from typing import Annotated, Dict

from fastapi import APIRouter, Body, Depends

from meridian.models import Enquiry, EntityKind
from meridian.service import BackOffice
from .deps import get_office
from .schemas import EnquiryCreate, EnquiryStatusUpdate

router = APIRouter(prefix="/enquiries", tags=["enquiries"])


@router.post("", status_code=201, response_model=Enquiry)
def create_enquiry(data: EnquiryCreate, office: BackOffice = Depends(get_office)):
    return office.create_enquiry(data.company_id, data.subject)


@router.get("/stats", response_model=Dict[str, int])
def enquiry_stats(office: BackOffice = Depends(get_office)):
    """Number of enquiries per status (every status present, zero-filled)."""
    return office.status_counts(EntityKind.ENQUIRY)


@router.get("/{enquiry_id}", response_model=Enquiry)
def get_enquiry(enquiry_id: int, office: BackOffice = Depends(get_office)):
    return office.get_enquiry(enquiry_id)


@router.post("/{enquiry_id}/status", response_model=Enquiry)
def update_enquiry_status(
    enquiry_id: int,
    update: Annotated[EnquiryStatusUpdate, Body(discriminator="status")],
    office: BackOffice = Depends(get_office),
):
    """
    Move an enquiry to a new status.

    * ``RCD`` needs ``date_of_receipt`` (``receipt_number`` optional).
    * ``WON`` needs ``purchase_order_number``, ``po_value`` > 0 and ``po_date``.
    * Other statuses take no extra data.

    Previously captured receipt / PO data is kept when moving elsewhere.
    """
    return office.update_enquiry_status(
        enquiry_id, update.status, update.payload(), expected_version=update.expected_version
    )
