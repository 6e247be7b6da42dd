"""
api.communications
==================

Logging a communication (follow-up date mandatory) and rescheduling it.
"""

from fastapi import APIRouter, Depends

from meridian.models import Communication
from meridian.service import BackOffice
from .deps import get_office
from .schemas import CommunicationCreate, RescheduleRequest

router = APIRouter(prefix="/communications", tags=["communications"])


@router.post("", status_code=201, response_model=Communication)
def create_communication(data: CommunicationCreate, office: BackOffice = Depends(get_office)):
    return office.create_communication(
        data.enquiry_id,
        data.type,
        data.next_communication_date,
        description=data.description,
        proposed_next_action=data.proposed_next_action,
    )


@router.get("/{communication_id}", response_model=Communication)
def get_communication(communication_id: int, office: BackOffice = Depends(get_office)):
    return office.get_communication(communication_id)


@router.post("/{communication_id}/reschedule", response_model=Communication)
def reschedule_communication(
    communication_id: int,
    data: RescheduleRequest,
    office: BackOffice = Depends(get_office),
):
    return office.reschedule_communication(
        communication_id,
        data.new_date,
        new_time=data.new_time,
        reason=data.reason,
        expected_version=data.expected_version,
    )
