"""Supabase-backed signature repository (implements ISignatureRepository)."""

from __future__ import annotations

import logging
from typing import Any

from signdesk.application.dtos.document import (
    SignatureRecordCreate,
    SignatureRecordResult,
)
from signdesk.domain.enums import DocumentType, SignerRole
from signdesk.domain.exceptions import StoreReadFailed, StoreWriteFailed
from signdesk.infrastructure.exceptions import SupabaseRequestError
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient
from signdesk.infrastructure.supabase.collections import (
    COL_CREATED_AT,
    COL_CREATED_BY,
    COL_DOCUMENT_ID,
    COL_ID,
    COL_SIGNATURE_TYPE,
    COL_SIGNATURE_URL,
    COL_STORAGE_PATH,
    COL_TRAINING_ID,
    COL_TYPE,
    COL_USER_ID,
    TABLE_DOCUMENT_SIGNATURES,
)
from signdesk.shared.utils.datetime import parse_timestamp

logger = logging.getLogger(__name__)


def _to_result(row: dict[str, Any]) -> SignatureRecordResult:
    return SignatureRecordResult(
        id=str(row.get(COL_ID, "")),
        document_id=row.get(COL_DOCUMENT_ID),
        training_id=row.get(COL_TRAINING_ID, ""),
        user_id=row.get(COL_USER_ID),
        document_type=DocumentType(row[COL_TYPE]),
        signer_role=SignerRole(row[COL_SIGNATURE_TYPE]),
        image_url=row.get(COL_SIGNATURE_URL, ""),
        storage_path=row.get(COL_STORAGE_PATH),
        created_at=parse_timestamp(row.get(COL_CREATED_AT)),
        created_by=row.get(COL_CREATED_BY),
    )


class SupabaseSignatureRepository:
    """Signature pointer rows in the document_signatures table."""

    def __init__(
        self, client: SupabaseRESTClient, table: str = TABLE_DOCUMENT_SIGNATURES
    ) -> None:
        self._table = client.table(table)

    async def get_latest(
        self,
        training_id: str,
        document_type: DocumentType,
        signer_role: SignerRole,
        user_id: str | None = None,
    ) -> SignatureRecordResult | None:
        """Newest record for the role; user_id None means a training-wide record."""
        query = (
            self._table.select()
            .eq(COL_TRAINING_ID, training_id)
            .eq(COL_TYPE, document_type.value)
            .eq(COL_SIGNATURE_TYPE, signer_role.value)
            .order(COL_CREATED_AT, descending=True)
        )
        query = query.eq(COL_USER_ID, user_id) if user_id else query.is_null(COL_USER_ID)
        try:
            row = await query.first()
        except SupabaseRequestError as e:
            raise StoreReadFailed(
                f"get_latest:{signer_role.value}", e.message
            ) from e
        if row is None or not row.get(COL_SIGNATURE_URL):
            return None
        return _to_result(row)

    async def create(self, data: SignatureRecordCreate) -> SignatureRecordResult:
        row = {
            COL_ID: data.id,
            COL_DOCUMENT_ID: data.document_id,
            COL_TRAINING_ID: data.training_id,
            COL_USER_ID: data.user_id,
            COL_TYPE: data.document_type.value,
            COL_SIGNATURE_TYPE: data.signer_role.value,
            COL_SIGNATURE_URL: data.image_url,
            COL_STORAGE_PATH: data.storage_path,
            COL_CREATED_BY: data.created_by,
        }
        try:
            stored = await self._table.insert(row)
        except SupabaseRequestError as e:
            raise StoreWriteFailed("insert_signature", e.message) from e
        logger.debug("Inserted %s signature record %s", data.signer_role.value, data.id)
        return _to_result({**row, **stored})
