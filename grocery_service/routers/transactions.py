import logging
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..entitlements import require_module
from ..models import Transaction, to_utc_naive, utcnow
from ..schemas import TransactionCreate, TransactionType, TransactionUpdate
from ..serializers import serialize_transaction

logger = logging.getLogger(__name__)

# Every ledger route is behind the income-expense module.
router = APIRouter(
    prefix="/api/admin/transactions",
    tags=["transactions"],
    dependencies=[Depends(require_module("income-expense"))],
)


def get_transaction_or_404(db: Session, transaction_id) -> Transaction:
    transaction = None
    if str(transaction_id).isdigit():
        transaction = db.get(Transaction, int(transaction_id))
    if transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return transaction


def summarize(db: Session, filters):
    """Income and expense totals over every row matching ``filters``, ignoring paging."""
    rows = (
        db.query(Transaction.type, func.sum(Transaction.amount), func.count(Transaction.id))
        .filter(*filters)
        .group_by(Transaction.type)
        .all()
    )
    totals = {kind: (amount or 0, count) for kind, amount, count in rows}
    total_income, income_count = totals.get("income", (0, 0))
    total_expense, expense_count = totals.get("expense", (0, 0))
    return {
        "totalIncome": total_income,
        "totalExpense": total_expense,
        "netAmount": total_income - total_expense,
        "incomeCount": income_count,
        "expenseCount": expense_count,
        "totalCount": income_count + expense_count,
    }


@router.get("")
def list_transactions(
    type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = Query(100, ge=1),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    filters = []
    if type:
        filters.append(Transaction.type == type)
    if category:
        filters.append(Transaction.category == category)
    if start_date:
        filters.append(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date:
        # The end date is inclusive of the whole day.
        filters.append(Transaction.date <= datetime.combine(end_date, time.max))

    transactions = (
        db.query(Transaction)
        .filter(*filters)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return {
        "transactions": [serialize_transaction(t) for t in transactions],
        "summary": summarize(db, filters),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transaction(req: TransactionCreate, db: Session = Depends(get_db)):
    data = req.model_dump()
    data["date"] = to_utc_naive(data["date"]) if data["date"] else utcnow()
    transaction = Transaction(**data)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info("Recorded %s of %s (%s)", transaction.type, transaction.amount, transaction.category)
    return {"success": True, "transaction": serialize_transaction(transaction)}


@router.get("/{transaction_id}")
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    return {"transaction": serialize_transaction(get_transaction_or_404(db, transaction_id))}


@router.patch("/{transaction_id}")
def update_transaction(transaction_id: str, req: TransactionUpdate, db: Session = Depends(get_db)):
    transaction = get_transaction_or_404(db, transaction_id)
    for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
        if field == "date":
            value = to_utc_naive(value)
        setattr(transaction, field, value)
    db.commit()
    db.refresh(transaction)
    return {"success": True, "transaction": serialize_transaction(transaction)}


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    transaction = get_transaction_or_404(db, transaction_id)
    db.delete(transaction)
    db.commit()
    return {"success": True, "message": "Transaction deleted successfully"}
