"""Unit tests for OrganizationSealResolver source order."""

from unittest.mock import AsyncMock

from signdesk.application.dtos.document import OrganizationSettings
from signdesk.application.interfaces.storage import StoredObject
from signdesk.application.services.organization_seal import OrganizationSealResolver
from signdesk.infrastructure.exceptions import StorageListError


def _resolver(settings_repo, storage) -> OrganizationSealResolver:
    return OrganizationSealResolver(
        settings_repo,
        storage,
        signatures_bucket="signatures",
        seals_bucket="organization-seals",
    )


async def test_settings_url_wins_without_touching_storage(settings_repo) -> None:
    settings_repo.settings = OrganizationSettings(
        organization_seal_url="https://cdn/seal.png",
        organization_seal_path="ignored.png",
    )
    storage = AsyncMock()
    assert await _resolver(settings_repo, storage).resolve() == "https://cdn/seal.png"
    storage.get_public_url.assert_not_called()
    storage.list_objects.assert_not_called()


async def test_settings_path_is_turned_into_public_url(settings_repo, storage) -> None:
    settings_repo.settings = OrganizationSettings(organization_seal_path="org/seal.png")
    url = await _resolver(settings_repo, storage).resolve()
    assert url == "http://storage.test/organization-seals/org/seal.png"


async def test_name_scan_picks_newest_matching_object(settings_repo, storage) -> None:
    for name in (
        "organization_seal_autre_t1_a.png",
        "organization_seal_autre_t1_b.png",
        "trainer_attestation_t1_c.png",
    ):
        await storage.upload(b"img", "signatures", name, "image/png")
    url = await _resolver(settings_repo, storage).resolve()
    assert url == "http://storage.test/signatures/organization_seal_autre_t1_b.png"


async def test_falls_back_to_seals_bucket(settings_repo, storage) -> None:
    await storage.upload(b"img", "organization-seals", "stamp.png", "image/png")
    url = await _resolver(settings_repo, storage).resolve()
    assert url == "http://storage.test/organization-seals/stamp.png"


async def test_returns_none_when_nothing_found(settings_repo, storage) -> None:
    assert await _resolver(settings_repo, storage).resolve() is None


async def test_settings_failure_falls_through_to_scan(settings_repo, storage) -> None:
    settings_repo.fail = True
    await storage.upload(b"img", "organization-seals", "stamp.png", "image/png")
    url = await _resolver(settings_repo, storage).resolve()
    assert url == "http://storage.test/organization-seals/stamp.png"


async def test_storage_failure_during_scan_yields_none(settings_repo) -> None:
    storage = AsyncMock()
    storage.list_objects.side_effect = StorageListError("signatures", "timeout")
    assert await _resolver(settings_repo, storage).resolve() is None


async def test_scan_ignores_search_false_positives(settings_repo) -> None:
    storage = AsyncMock()
    storage.list_objects.side_effect = [
        [StoredObject(name="notes.png")],
        [],
    ]
    assert await _resolver(settings_repo, storage).resolve() is None
