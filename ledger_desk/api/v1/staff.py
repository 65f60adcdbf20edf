"""GET /v1/staff/{staff_id}/payments/total - Total paid to a staff member"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ledger_desk.api.dependencies import get_staff_payment_repository
from ledger_desk.api.v1.schemas import StaffTotalPaidResponse
from ledger_desk.domain.ledger import total_paid
from ledger_desk.infrastructure.database.repositories import StaffPaymentRepository

router = APIRouter()


@router.get("/staff/{staff_id}/payments/total", response_model=StaffTotalPaidResponse)
def get_staff_total_paid(
    staff_id: int,
    user_id: int = Query(..., description="Owning user identifier"),
    repo: StaffPaymentRepository = Depends(get_staff_payment_repository),
):
    payments = repo.list_payments(user_id, staff_id)
    if payments is None:
        raise HTTPException(status_code=404, detail="Staff member not found")

    return StaffTotalPaidResponse(
        success=True,
        staff_id=staff_id,
        payment_count=len(payments),
        total_paid=total_paid(p.amount for p in payments),
    )
