"""
api.tasks
=========

The derived worklist.  Nothing here writes: every call rebuilds the task
list from the current quotations and communications.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from meridian.models import Priority, Task, TaskType
from meridian.service import BackOffice
from .deps import get_office

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/upcoming", response_model=List[Task])
def upcoming_tasks(
    type: Optional[TaskType] = Query(None, description="Only QUOTATION or COMMUNICATION tasks"),
    priority: Optional[Priority] = Query(None, description="Only high, medium or low tasks"),
    office: BackOffice = Depends(get_office),
):
    """Every open task, sorted by due date (then type, then source id)."""
    return office.get_upcoming_tasks(type, priority)


@router.get("/summary", response_model=Dict[str, Dict[str, int]])
def task_summary(office: BackOffice = Depends(get_office)):
    return office.task_summary()
