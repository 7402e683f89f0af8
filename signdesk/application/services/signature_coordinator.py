"""Signature coordination for one viewer session on one document instance.

A SignatureCoordinator owns the in-memory signature snapshot for a
(document_type, training_id, participant_id) triple, decides which role may
sign next, and persists new signatures. Hosts (HTTP routes, renderers)
observe changes through subscribe() instead of global events.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from signdesk.application.dtos.document import SignatureRecordCreate
from signdesk.application.services.organization_seal import OrganizationSealResolver
from signdesk.application.services.signature_payload import decode_signature_payload
from signdesk.domain.entities.signature import SignatureSet
from signdesk.domain.enums import DocumentType, SignerRole, ViewContext
from signdesk.domain.exceptions import (
    AlreadySigned,
    AuthenticationRequired,
    CoordinatorClosed,
    NotPermittedForRole,
    OutOfOrder,
    SignaturesNotLoaded,
    StoreException,
    StoreReadFailed,
    StoreWriteFailed,
)
from signdesk.domain.signature_policy import (
    DEFAULT_PENDING_MESSAGE,
    get_signature_requirements,
    parse_document_type,
    parse_signer_role,
)
from signdesk.shared.utils import generate_cuid

if TYPE_CHECKING:
    from signdesk.application.interfaces.repositories import (
        ISettingsRepository,
        ISignatureRepository,
    )
    from signdesk.application.interfaces.services import ISessionProvider
    from signdesk.application.interfaces.storage import IStorageService
    from signdesk.application.use_cases.documents import DocumentLookupService
    from signdesk.domain.entities.document import DocumentEntity

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading signatures..."
NOT_REQUIRED_MESSAGE = "Your signature is not required for this document"
ALREADY_SIGNED_MESSAGE = "You have already signed this document"
FULLY_SIGNED_MESSAGE = "Document fully signed"
YOUR_TURN_MESSAGE = "Your signature is required"

SignatureListener = Callable[[SignerRole, str | None], None]

# Roles whose records are shared by every participant of a training.
_TRAINING_WIDE_ROLES = frozenset({SignerRole.TRAINER, SignerRole.ORGANIZATION_SEAL})

# Candidate roles for the current viewer, in priority order.
_VIEWER_ROLES: dict[ViewContext, tuple[SignerRole, ...]] = {
    ViewContext.STUDENT: (SignerRole.PARTICIPANT,),
    ViewContext.CRM: (SignerRole.REPRESENTATIVE, SignerRole.TRAINER),
}


@dataclass(frozen=True)
class SignPermission:
    """Result of a permission check; reason and reason_code are set when refused."""

    allowed: bool
    reason: str | None = None
    reason_code: str | None = None


@dataclass(frozen=True)
class SignatureButtonState:
    """What the host should show as the sign action for the current viewer."""

    show: bool
    enabled: bool
    text: str
    role: SignerRole | None = None


_HIDDEN_BUTTON = SignatureButtonState(show=False, enabled=False, text="")


class SignatureCoordinator:
    """Stateful signature session for one document instance and one viewer.

    Loads existing signatures, answers can_sign / status queries from the
    in-memory snapshot, and persists new signatures (upload image, insert
    pointer record, then replace the snapshot). Last write wins per role.
    """

    def __init__(
        self,
        document_type: DocumentType | str,
        training_id: str,
        participant_id: str,
        view_context: ViewContext | str,
        *,
        signature_repo: ISignatureRepository,
        settings_repo: ISettingsRepository,
        storage: IStorageService,
        session_provider: ISessionProvider,
        document_lookup: DocumentLookupService | None = None,
        participant_name: str | None = None,
        signatures_bucket: str = "signatures",
        seals_bucket: str = "organization-seals",
        max_signature_bytes: int = 512 * 1024,
        seal_scan_limit: int = 20,
        on_signature_change: SignatureListener | None = None,
        auto_load: bool = True,
    ) -> None:
        self.document_type = parse_document_type(document_type)
        self.training_id = training_id
        self.participant_id = participant_id
        self.view_context = ViewContext(view_context)
        self.participant_name = participant_name
        self.requirements = get_signature_requirements(self.document_type)

        self._signature_repo = signature_repo
        self._storage = storage
        self._session_provider = session_provider
        self._document_lookup = document_lookup
        self._signatures_bucket = signatures_bucket
        self._max_signature_bytes = max_signature_bytes
        self._auto_load = auto_load
        self._seal_resolver = OrganizationSealResolver(
            settings_repo,
            storage,
            signatures_bucket=signatures_bucket,
            seals_bucket=seals_bucket,
            scan_limit=seal_scan_limit,
        )

        self._signatures = SignatureSet.empty()
        self._loaded = False
        self._closed = False
        self._load_lock = asyncio.Lock()
        self._document: DocumentEntity | None = None
        self._listeners: list[SignatureListener] = []
        if on_signature_change is not None:
            self._listeners.append(on_signature_change)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SignatureListener) -> Callable[[], None]:
        """Register listener for (role, url) changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def destroy(self) -> None:
        """Drop every listener and refuse further saves. In-flight loads are discarded."""
        self._closed = True
        self._listeners.clear()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _notify(self, role: SignerRole, url: str | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(role, url)
            except Exception:
                logger.exception("Signature listener failed for role %s", role.value)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def signatures_loaded(self) -> bool:
        return self._loaded

    @property
    def document(self) -> DocumentEntity | None:
        return self._document

    def get_signatures(self) -> SignatureSet:
        """Return the current snapshot (immutable)."""
        return self._signatures

    def can_sign(self, role: SignerRole | str) -> SignPermission:
        """Decide whether role may sign now, from the in-memory snapshot only."""
        role = parse_signer_role(role)
        if not self._loaded:
            return SignPermission(False, LOADING_MESSAGE, "LOADING")
        if not self.requirements.allows(role):
            return SignPermission(False, NOT_REQUIRED_MESSAGE, "NOT_PERMITTED")
        # Trainers may re-sign; the newest record wins.
        if self._signatures.has(role) and role != SignerRole.TRAINER:
            return SignPermission(False, ALREADY_SIGNED_MESSAGE, "ALREADY_SIGNED")
        if self._signatures.missing(self.requirements.predecessors(role)):
            return SignPermission(
                False, self.requirements.pending_message_or_default, "OUT_OF_ORDER"
            )
        return SignPermission(True)

    def is_fully_signed(self) -> bool:
        """True when every required role has a recorded image."""
        return not self._signatures.missing(self.requirements.required_roles)

    def get_signature_status_message(self) -> str:
        if not self._loaded:
            return LOADING_MESSAGE
        if self.is_fully_signed():
            return FULLY_SIGNED_MESSAGE
        for role in _VIEWER_ROLES[self.view_context]:
            if (
                role in self.requirements.required_roles
                and not self._signatures.has(role)
                and self.can_sign(role).allowed
            ):
                return YOUR_TURN_MESSAGE
        return self.requirements.pending_message_or_default

    def get_signature_button_state(self) -> SignatureButtonState:
        """Sign action for the viewer: first signable viewer role, else a trainer re-sign."""
        if not self._loaded:
            return _HIDDEN_BUTTON
        for role in _VIEWER_ROLES[self.view_context]:
            if self.can_sign(role).allowed:
                verb = "Re-sign" if self._signatures.has(role) else "Sign"
                return SignatureButtonState(True, True, f"{verb} as {role.value}", role)
        return _HIDDEN_BUTTON

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_document(self) -> DocumentEntity | None:
        """Get or create the document row for this context. Errors propagate."""
        if self._document_lookup is None:
            return None
        self._document = await self._document_lookup.get_or_create(
            self.document_type, self.training_id, self.participant_id
        )
        return self._document

    async def initialize(self) -> None:
        await self.load_document()
        await self.load_existing_signatures()

    async def load_existing_signatures(self) -> None:
        """Fetch the newest record per role concurrently and swap the snapshot in once.

        Per-role read failures are logged and leave that role empty. Concurrent
        callers share one load.
        """
        await self._load(force=False)

    async def refresh_signatures(self) -> SignatureSet:
        """Discard the snapshot and reload from the store, even if a load just finished."""
        await self._load(force=True)
        return self._signatures

    async def _load(self, force: bool) -> None:
        async with self._load_lock:
            if self._loaded and not force:
                return
            if not self._auto_load:
                self._loaded = True
                return

            roles = list(self._roles_to_load())
            results = await asyncio.gather(*(self._load_role(role) for role in roles))
            if self._closed:
                logger.debug("Coordinator closed during load; discarding results")
                return

            previous = self._signatures
            self._signatures = SignatureSet.from_mapping(dict(zip(roles, results)))
            self._loaded = True
            logger.info(
                "Loaded signatures for %s training=%s participant=%s: %s",
                self.document_type.value,
                self.training_id,
                self.participant_id,
                sorted(role.value for role in roles if self._signatures.has(role)),
            )

        for role in self._signatures.changed_roles(previous):
            self._notify(role, self._signatures.get(role))

    def _roles_to_load(self):
        for role in SignerRole:
            if role == SignerRole.COMPANY_SEAL and not self.requirements.allows(role):
                continue
            yield role

    def _user_scope(self, role: SignerRole) -> str | None:
        return None if role in _TRAINING_WIDE_ROLES else self.participant_id

    async def _load_role(self, role: SignerRole) -> str | None:
        try:
            record = await self._signature_repo.get_latest(
                self.training_id,
                self.document_type,
                role,
                user_id=self._user_scope(role),
            )
        except StoreReadFailed as e:
            logger.warning("Could not load %s signature: %s", role.value, e.message)
            record = None
        if record is not None:
            return record.image_url
        if role == SignerRole.ORGANIZATION_SEAL:
            return await self._seal_resolver.resolve()
        return None

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def _check_permission(self, role: SignerRole) -> None:
        permission = self.can_sign(role)
        if permission.allowed:
            return
        if permission.reason_code == "LOADING":
            raise SignaturesNotLoaded(role.value)
        if permission.reason_code == "NOT_PERMITTED":
            raise NotPermittedForRole(role.value, self.document_type.value)
        if permission.reason_code == "ALREADY_SIGNED":
            raise AlreadySigned(role.value)
        raise OutOfOrder(
            role.value,
            permission.reason or DEFAULT_PENDING_MESSAGE,
            [r.value for r in self._signatures.missing(self.requirements.predecessors(role))],
        )

    async def save_signature(self, image_data: str, role: SignerRole | str) -> str:
        """Validate, upload and record a signature, then update the snapshot.

        Returns:
            Public URL of the stored image.

        Raises:
            CoordinatorClosed: destroy() was called.
            AuthenticationRequired: No signed-in session.
            InvalidSignaturePayload: Image data is empty or not a PNG/JPEG image.
            NotPermittedForRole, AlreadySigned, OutOfOrder: Refused by policy.
            StoreWriteFailed: Upload or insert failed; the snapshot is unchanged.
        """
        if self._closed:
            raise CoordinatorClosed()
        role = parse_signer_role(role)

        session = await self._session_provider.get_session()
        if session is None:
            raise AuthenticationRequired()

        image = decode_signature_payload(image_data, self._max_signature_bytes)

        if not self._loaded:
            await self.load_existing_signatures()
        self._check_permission(role)
        if self._document is None:
            await self.load_document()

        path = (
            f"{role.value}_{self.document_type.value}_{self.training_id}_{generate_cuid()}"
            f".{image.extension}"
        )
        metadata = {"role": role.value, "training_id": self.training_id}
        if self.participant_name:
            metadata["participant_name"] = self.participant_name
        try:
            await self._storage.upload(
                image.content,
                self._signatures_bucket,
                path,
                image.content_type,
                metadata=metadata,
            )
            url = await self._storage.get_public_url(self._signatures_bucket, path)
        except StoreWriteFailed:
            raise
        except StoreException as e:
            raise StoreWriteFailed("upload", e.message) from e

        record = SignatureRecordCreate(
            id=generate_cuid(),
            document_id=self._document.id if self._document else None,
            training_id=self.training_id,
            user_id=self._user_scope(role),
            document_type=self.document_type,
            signer_role=role,
            title=role.label,
            image_url=url,
            storage_path=path,
            created_by=session.user_id,
        )
        try:
            await self._signature_repo.create(record)
        except StoreWriteFailed:
            logger.error(
                "Signature record insert failed; image left at %s/%s",
                self._signatures_bucket,
                path,
            )
            raise

        if self._closed:
            return url
        self._signatures = self._signatures.with_signature(role, url)
        logger.info(
            "Saved %s signature for %s training=%s participant=%s",
            role.value,
            self.document_type.value,
            self.training_id,
            self.participant_id,
        )
        self._notify(role, url)
        return url
