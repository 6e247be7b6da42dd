#!/usr/bin/env python
"""
Seed database with sample records for testing.

This script creates a handful of companies, enquiries, quotations and
communications so the worklist and the status counts show meaningful
data.  Dates are relative to today, so the demo always has overdue,
near-term and later tasks.
"""

from datetime import date, datetime, time, timedelta

from meridian.models import CommunicationType, EnquiryStatus, QuotationStatus
from meridian.service import BackOffice
from meridian.store_db import DBStore

TODAY = date.today()

# (company, enquiry subject, quotation value, validity offset in days, quotation status)
SAMPLE_ENQUIRIES = [
    ("Acme Steel", "Ladle furnace relining", 185000.0, 1, QuotationStatus.LIVE),
    ("Widget Industries", "Rotary kiln burner", 42000.0, -2, QuotationStatus.DRAFT),
    ("Sunrise Cement", "Pre-heater refractory", 97500.0, 12, QuotationStatus.LIVE),
    ("Pacific Alloys", "Tundish castables", 23000.0, 5, QuotationStatus.DRAFT),
]

# (enquiry index, type, follow-up offset in days, next action)
SAMPLE_COMMUNICATIONS = [
    (0, CommunicationType.TELEPHONIC, -1, "Confirm PO timeline"),
    (1, CommunicationType.PLANT_VISIT, 0, "Inspect kiln inlet"),
    (2, CommunicationType.VIRTUAL_MEETING, 3, "Walk through drawings"),
    (3, CommunicationType.EMAIL, 20, "Send revised price"),
]


def seed_database():
    """Add sample records to the database."""
    with DBStore() as store:
        office = BackOffice(store=store)
        enquiries = []
        for name, subject, value, offset, status in SAMPLE_ENQUIRIES:
            company = office.create_company(name)
            enquiry = office.create_enquiry(company.id, subject)
            enquiries.append(enquiry)
            office.create_quotation(
                enquiry.id,
                total_value=value,
                validity_period=TODAY + timedelta(days=offset),
                status=status,
            )
            print(f"Added: {name} / {subject}")

        office.update_enquiry_status(
            enquiries[0].id, EnquiryStatus.RCD, {"date_of_receipt": TODAY - timedelta(days=3)}
        )

        for idx, comm_type, offset, action in SAMPLE_COMMUNICATIONS:
            due = datetime.combine(TODAY + timedelta(days=offset), time(10, 0))
            office.create_communication(
                enquiries[idx].id, comm_type, due,
                description=f"{comm_type.value.title()} with customer",
                proposed_next_action=action,
            )

        print(f"\nAdded {len(SAMPLE_ENQUIRIES)} enquiries and {len(SAMPLE_COMMUNICATIONS)} communications!")


if __name__ == "__main__":
    # Initialize DB if needed
    from meridian.db import create_all
    print("Ensuring database tables exist...")
    create_all()

    print("Seeding database with sample records...")
    seed_database()

    print("\nDone! You can now run the API server with:")
    print("  uvicorn api.main:app --reload")
