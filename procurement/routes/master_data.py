# ==== CATEGORY AND CLIENT ROUTES ==== #

"""
CRUD endpoints for vendor categories and clients.

Both are simple reference tables: list, read, create and full replace.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.exceptions import NotFoundError
from procurement.observability.tracing import get_tracer
from procurement.schemas.master_data import (
    ClientRequest, ClientResponse, KategoriRequest, KategoriResponse
)
from procurement.storage import repositories
from procurement.storage.db import get_db_session


tracer = get_tracer(__name__)
kategori_router = APIRouter()
client_router = APIRouter()


# ==== KATEGORI ==== #


@kategori_router.get("", response_model=list[KategoriResponse])
async def list_kategori(db: AsyncSession = Depends(get_db_session)) -> list[KategoriResponse]:
    """List categories in id order."""
    rows = await repositories.list_kategori(db)
    return [KategoriResponse.model_validate(row) for row in rows]


@kategori_router.get("/{id_kategori:int}", response_model=KategoriResponse)
async def get_kategori(
    id_kategori: int,
    db: AsyncSession = Depends(get_db_session)
) -> KategoriResponse:
    """Get one category."""
    kategori = await repositories.get_kategori(db, id_kategori)
    if kategori is None:
        raise NotFoundError("Kategori", id_kategori)
    return KategoriResponse.model_validate(kategori)


@kategori_router.post("", response_model=KategoriResponse, status_code=201)
async def create_kategori(
    payload: KategoriRequest,
    db: AsyncSession = Depends(get_db_session)
) -> KategoriResponse:
    """Create a category."""
    with tracer.start_as_current_span("create_kategori"):
        kategori = await repositories.create_kategori(db, payload.model_dump())
        await db.commit()
        return KategoriResponse.model_validate(kategori)


@kategori_router.put("/{id_kategori:int}", response_model=KategoriResponse)
async def update_kategori(
    id_kategori: int,
    payload: KategoriRequest,
    db: AsyncSession = Depends(get_db_session)
) -> KategoriResponse:
    """Rename a category."""
    kategori = await repositories.get_kategori(db, id_kategori)
    if kategori is None:
        raise NotFoundError("Kategori", id_kategori)
    repositories.apply_changes(kategori, payload.model_dump())
    await db.commit()
    return KategoriResponse.model_validate(kategori)


# ==== CLIENT ==== #


@client_router.get("", response_model=list[ClientResponse])
async def list_clients(db: AsyncSession = Depends(get_db_session)) -> list[ClientResponse]:
    """List clients in id order."""
    rows = await repositories.list_clients(db)
    return [ClientResponse.model_validate(row) for row in rows]


@client_router.get("/{id_client:int}", response_model=ClientResponse)
async def get_client(
    id_client: int,
    db: AsyncSession = Depends(get_db_session)
) -> ClientResponse:
    """Get one client."""
    client = await repositories.get_client(db, id_client)
    if client is None:
        raise NotFoundError("Client", id_client)
    return ClientResponse.model_validate(client)


@client_router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    payload: ClientRequest,
    db: AsyncSession = Depends(get_db_session)
) -> ClientResponse:
    """Create a client."""
    with tracer.start_as_current_span("create_client"):
        client = await repositories.create_client(db, payload.model_dump())
        await db.commit()
        return ClientResponse.model_validate(client)


@client_router.put("/{id_client:int}", response_model=ClientResponse)
async def update_client(
    id_client: int,
    payload: ClientRequest,
    db: AsyncSession = Depends(get_db_session)
) -> ClientResponse:
    """Replace a client's brand, company name and address."""
    client = await repositories.get_client(db, id_client)
    if client is None:
        raise NotFoundError("Client", id_client)
    repositories.apply_changes(client, payload.model_dump())
    await db.commit()
    return ClientResponse.model_validate(client)
