from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_current_identity, subject_of
from app.core.db import get_db
from app.domains.access.schemas import PermissionsResponse
from app.domains.access.services import AccessRegistry
from app.domains.documents.schemas import DocumentCreate, DocumentResponse, DocumentListResponse
from app.domains.documents.services import DocumentService
from app.domains.identity.entities import Identity

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document = await DocumentService(db).create(subject_of(identity), document_data.title)
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Активные документы пользователя"""
    documents = await DocumentService(db).list_active(subject_of(identity))
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents)
    )


@router.get("/trash", response_model=DocumentListResponse)
async def list_trash(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Документы пользователя в корзине"""
    documents = await DocumentService(db).list_archived(subject_of(identity))
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents)
    )


@router.get("/{document_uuid}", response_model=DocumentResponse)
async def get_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по UUID"""
    document = await DocumentService(db).get(document_uuid, subject_of(identity))
    
    # Недоступный документ неотличим от отсутствующего
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    
    return DocumentResponse.model_validate(document)


@router.get("/{document_uuid}/permissions", response_model=PermissionsResponse)
async def get_permissions(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Права вызывающего на документ"""
    permissions = await AccessRegistry(db).describe_access(document_uuid, subject_of(identity))
    return PermissionsResponse(document_id=document_uuid, **permissions)


@router.post("/{document_uuid}/archive", response_model=DocumentResponse)
async def archive_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).archive(document_uuid, subject_of(identity))
    return DocumentResponse.model_validate(document)


@router.post("/{document_uuid}/restore", response_model=DocumentResponse)
async def restore_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).restore(document_uuid, subject_of(identity))
    return DocumentResponse.model_validate(document)


@router.post("/{document_uuid}/publish", response_model=DocumentResponse)
async def publish_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).set_published(document_uuid, subject_of(identity), True)
    return DocumentResponse.model_validate(document)


@router.post("/{document_uuid}/unpublish", response_model=DocumentResponse)
async def unpublish_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).set_published(document_uuid, subject_of(identity), False)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Окончательное удаление документа"""
    await DocumentService(db).remove(document_uuid, subject_of(identity))
