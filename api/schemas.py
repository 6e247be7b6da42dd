"""
api.schemas
===========

Request bodies for the HTTP layer.

Status updates are discriminated unions tagged by ``status``: each variant
lists the fields its target status understands.  Those fields are all
optional here on purpose; whether they are *required* is decided by the
status rule registry, so a missing ``date_of_receipt`` comes back as a
``missing_required_field`` error naming the field rather than a generic
schema error.  Unknown extra keys are passed through so the registry's
strict / lenient payload policy applies to HTTP callers too.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from meridian.models import CommunicationType, LostReason


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


BlankDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]
BlankDateTime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]
BlankFloat = Annotated[Optional[float], BeforeValidator(_blank_to_none)]


class _Transition(BaseModel):
    """Common shape of a status update body."""
    model_config = ConfigDict(extra="allow")

    expected_version: Optional[int] = Field(
        None, description="Reject the update if the record has moved past this version"
    )

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"status", "expected_version"}, exclude_none=True)


# ---------------------------------------------------------------------------
# Enquiry transitions
# ---------------------------------------------------------------------------
class EnquiryToRcd(_Transition):
    status: Literal["RCD"]
    date_of_receipt: BlankDate = None
    receipt_number: Optional[str] = None


class EnquiryToWon(_Transition):
    status: Literal["WON"]
    purchase_order_number: Optional[str] = None
    po_value: BlankFloat = None
    po_date: BlankDate = None


class EnquiryToOther(_Transition):
    status: Literal["LIVE", "DEAD", "LOST", "BUDGETARY"]


# tagged by `status`; routers declare it with Body(discriminator="status")
EnquiryStatusUpdate = Union[EnquiryToRcd, EnquiryToWon, EnquiryToOther]


# ---------------------------------------------------------------------------
# Quotation transitions
# ---------------------------------------------------------------------------
class QuotationToLost(_Transition):
    status: Literal["LOST"]
    lost_reason: Annotated[Optional[LostReason], BeforeValidator(_blank_to_none)] = None


class QuotationToPurchaseOrder(_Transition):
    status: Literal["WON", "RECEIVED"]
    purchase_order_number: Optional[str] = None
    po_value: BlankFloat = None
    po_date: BlankDate = None


class QuotationToOther(_Transition):
    status: Literal["DRAFT", "LIVE", "BUDGETARY", "DEAD"]


QuotationStatusUpdate = Union[QuotationToLost, QuotationToPurchaseOrder, QuotationToOther]


# ---------------------------------------------------------------------------
# Creation bodies
# ---------------------------------------------------------------------------
class CompanyCreate(BaseModel):
    name: str


class EnquiryCreate(BaseModel):
    company_id: int
    subject: str = ""


class QuotationCreate(BaseModel):
    enquiry_id: int
    total_value: float = 0.0
    validity_period: BlankDate = None
    quotation_number: Optional[str] = None
    status: Literal["DRAFT", "LIVE"] = "DRAFT"


class CommunicationCreate(BaseModel):
    enquiry_id: int
    type: CommunicationType
    description: str = ""
    next_communication_date: BlankDateTime = None
    proposed_next_action: Optional[str] = None


class RescheduleRequest(BaseModel):
    new_date: BlankDateTime = None
    new_time: Optional[str] = Field(None, pattern=r"^\d{1,2}:\d{2}$")
    reason: Optional[str] = None
    expected_version: Optional[int] = None

