"""Expense routes for account owners."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.invoicer.dependencies.auth import get_current_user
from backend.invoicer.dependencies.services import get_store
from backend.invoicer.models.user import User
from backend.invoicer.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from backend.invoicer.services.storage import EntityStore

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("/", response_model=List[ExpenseRead])
async def list_expenses(store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    return store.get_expenses(current_user.id)


@router.post("/", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense(
    payload: ExpenseCreate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.create_expense(current_user.id, payload.model_dump())


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    expense = store.get_expense(expense_id, current_user.id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.patch("/{expense_id}", response_model=ExpenseRead)
async def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    expense = store.update_expense(expense_id, current_user.id, payload.model_dump(exclude_unset=True))
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    deleted = store.delete_expense(expense_id, current_user.id)
    return {"deleted": deleted, "id": expense_id}
