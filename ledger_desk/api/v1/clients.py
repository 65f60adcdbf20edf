"""GET /v1/clients/{client_id}/transactions - Client transaction list"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ledger_desk.api.dependencies import get_transaction_repository
from ledger_desk.api.v1.schemas import ClientTransactionItem, ClientTransactionsResponse
from ledger_desk.infrastructure.database.repositories import TransactionRepository
from ledger_desk.utils.date_utils import format_display_date

router = APIRouter()


@router.get("/clients/{client_id}/transactions", response_model=ClientTransactionsResponse)
def get_client_transactions(
    client_id: int,
    user_id: int = Query(..., description="Owning user identifier"),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    List a client's transactions, newest first.

    Dates are preformatted for display; the description is the first line
    item's, or "Service" when the transaction has none.
    """
    if repo.get_client(user_id, client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")

    transactions = repo.list_client_transactions(user_id, client_id)
    items = [
        ClientTransactionItem(
            id=t.id,
            transaction_id=t.transaction_id,
            date=format_display_date(t.transaction_date) if t.transaction_date else None,
            due_date=format_display_date(t.due_date) if t.due_date else None,
            amount=t.total_amount,
            status=t.status,
            description=t.description or "Service",
            reference_number=t.reference_number,
        )
        for t in transactions
    ]

    return ClientTransactionsResponse(success=True, client_id=client_id, transactions=items)
