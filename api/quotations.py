"""
api.quotations
==============

Quotation endpoints: creation, lookup, status counts and the gated status
update.
"""

from typing import Annotated, Dict

from fastapi import APIRouter, Body, Depends

from meridian.models import EntityKind, Quotation
from meridian.service import BackOffice
from .deps import get_office
from .schemas import QuotationCreate, QuotationStatusUpdate

router = APIRouter(prefix="/quotations", tags=["quotations"])


@router.post("", status_code=201, response_model=Quotation)
def create_quotation(data: QuotationCreate, office: BackOffice = Depends(get_office)):
    return office.create_quotation(
        data.enquiry_id,
        total_value=data.total_value,
        validity_period=data.validity_period,
        quotation_number=data.quotation_number,
        status=data.status,
    )


@router.get("/stats", response_model=Dict[str, int])
def quotation_stats(office: BackOffice = Depends(get_office)):
    return office.status_counts(EntityKind.QUOTATION)


@router.get("/{quotation_id}", response_model=Quotation)
def get_quotation(quotation_id: int, office: BackOffice = Depends(get_office)):
    return office.get_quotation(quotation_id)


@router.post("/{quotation_id}/status", response_model=Quotation)
def update_quotation_status(
    quotation_id: int,
    update: Annotated[QuotationStatusUpdate, Body(discriminator="status")],
    office: BackOffice = Depends(get_office),
):
    """
    Move a quotation to a new status.

    * ``LOST`` needs ``lost_reason``.
    * ``RECEIVED`` needs ``purchase_order_number``; ``po_value`` / ``po_date`` optional.
    * ``WON`` accepts the same PO fields, all optional.
    """
    return office.update_quotation_status(
        quotation_id, update.status, update.payload(), expected_version=update.expected_version
    )
