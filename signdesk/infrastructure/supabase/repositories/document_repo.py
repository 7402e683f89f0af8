"""Supabase-backed document repository (implements IDocumentRepository).

Logical document rows and generated file rows share the documents table;
file rows are the ones with a file_url.
"""

from __future__ import annotations

import logging
from typing import Any

from signdesk.application.dtos.document import DocumentCreate, DocumentFileCreate
from signdesk.domain.entities.document import DocumentEntity
from signdesk.domain.enums import DocumentStatus, DocumentType
from signdesk.domain.exceptions import StoreReadFailed, StoreWriteFailed
from signdesk.infrastructure.exceptions import SupabaseRequestError
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient
from signdesk.infrastructure.supabase.collections import (
    COL_CREATED_AT,
    COL_CREATED_BY,
    COL_FILE_URL,
    COL_ID,
    COL_NEED_STAMP,
    COL_STATUS,
    COL_TITLE,
    COL_TRAINING_ID,
    COL_TYPE,
    COL_USER_ID,
    TABLE_DOCUMENTS,
)
from signdesk.shared.utils.datetime import parse_timestamp

logger = logging.getLogger(__name__)


def _to_entity(row: dict[str, Any]) -> DocumentEntity:
    return DocumentEntity(
        id=str(row[COL_ID]),
        document_type=DocumentType(row[COL_TYPE]),
        training_id=row.get(COL_TRAINING_ID, ""),
        participant_id=row.get(COL_USER_ID, ""),
        title=row.get(COL_TITLE),
        status=DocumentStatus(row.get(COL_STATUS) or DocumentStatus.DRAFT.value),
        need_stamp=bool(row.get(COL_NEED_STAMP)),
        created_at=parse_timestamp(row.get(COL_CREATED_AT)),
    )


class SupabaseDocumentRepository:
    """Documents table access keyed by (type, training_id, user_id)."""

    def __init__(self, client: SupabaseRESTClient, table: str = TABLE_DOCUMENTS) -> None:
        self._table = client.table(table)

    async def get_by_context(
        self,
        document_type: DocumentType,
        training_id: str,
        participant_id: str,
    ) -> DocumentEntity | None:
        try:
            row = await (
                self._table.select()
                .eq(COL_TYPE, document_type.value)
                .eq(COL_TRAINING_ID, training_id)
                .eq(COL_USER_ID, participant_id)
                .is_null(COL_FILE_URL)
                .order(COL_CREATED_AT)
                .first()
            )
        except SupabaseRequestError as e:
            raise StoreReadFailed("get_document", e.message) from e
        return _to_entity(row) if row else None

    async def create_document(self, data: DocumentCreate) -> DocumentEntity:
        row = {
            COL_ID: data.id,
            COL_TYPE: data.document_type.value,
            COL_TRAINING_ID: data.training_id,
            COL_USER_ID: data.participant_id,
            COL_TITLE: data.title or data.document_type.value,
            COL_STATUS: data.status.value,
            COL_NEED_STAMP: data.need_stamp,
        }
        try:
            stored = await self._table.insert(row)
        except SupabaseRequestError as e:
            raise StoreWriteFailed("create_document", e.message) from e
        return _to_entity({**row, **stored})

    async def update_need_stamp(self, document_id: str, need_stamp: bool) -> None:
        try:
            await self._table.update({COL_ID: document_id}, {COL_NEED_STAMP: need_stamp})
        except SupabaseRequestError as e:
            raise StoreWriteFailed("update_need_stamp", e.message) from e

    async def create_file_record(self, data: DocumentFileCreate) -> None:
        row = {
            COL_ID: data.id,
            COL_TYPE: data.document_type.value,
            COL_TRAINING_ID: data.training_id,
            COL_USER_ID: data.participant_id,
            COL_TITLE: data.title,
            COL_FILE_URL: data.file_url,
            COL_CREATED_BY: data.created_by,
        }
        try:
            await self._table.insert(row)
        except SupabaseRequestError as e:
            raise StoreWriteFailed("create_file_record", e.message) from e
        logger.debug("Recorded %s file %s", data.document_type.value, data.id)

    async def get_latest_file_url(
        self,
        document_type: DocumentType,
        training_id: str,
        participant_id: str,
    ) -> str | None:
        try:
            row = await (
                self._table.select(COL_FILE_URL)
                .eq(COL_TYPE, document_type.value)
                .eq(COL_TRAINING_ID, training_id)
                .eq(COL_USER_ID, participant_id)
                .not_null(COL_FILE_URL)
                .order(COL_CREATED_AT, descending=True)
                .first()
            )
        except SupabaseRequestError as e:
            raise StoreReadFailed("get_latest_file", e.message) from e
        return row.get(COL_FILE_URL) if row else None
