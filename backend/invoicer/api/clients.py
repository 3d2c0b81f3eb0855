"""Client routes for account owners."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.invoicer.dependencies.auth import get_current_user
from backend.invoicer.dependencies.services import get_store
from backend.invoicer.models.user import User
from backend.invoicer.schemas.client import ClientCreate, ClientRead, ClientUpdate
from backend.invoicer.services.storage import EntityStore

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=List[ClientRead])
async def list_clients(store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    return store.get_clients(current_user.id)


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.create_client(current_user.id, payload.model_dump())


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    client = store.get_client(client_id, current_user.id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    payload: ClientUpdate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    client = store.update_client(client_id, current_user.id, payload.model_dump(exclude_unset=True))
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.delete("/{client_id}")
async def delete_client(client_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    deleted = store.delete_client(client_id, current_user.id)
    return {"deleted": deleted, "id": client_id}
