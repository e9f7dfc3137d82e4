"""
Tests for the property submission wizard.

The service is replaced with AsyncMocks on a real client; the local cache
writes to a temporary directory.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from client.api import HomeHNIClient, Session
from client.cancellation import CancellationToken
from client.errors import (
    AuthRequiredError,
    DraftClosedError,
    MediaFileError,
    NetworkError,
    NotFoundError,
    StepValidationError,
)
from client.local_store import LocalDraftStore
from client.wizard import DraftWizard, DraftWriteQueue, WizardStatus

RENTAL_STEPS = [
    {"property_type": "Apartment", "bhk_type": "2BHK"},
    {"state": "Maharashtra", "city": "Pune", "locality": "Baner"},
    {"expected_rent": 25000},
    {"lift": "Yes"},
    {},
    {},
]


def remote_draft(draft_id, data, step, form_type="rental"):
    return {"id": draft_id, "form_type": form_type, "current_step": step, "data": data}


@pytest.fixture
async def client():
    client = HomeHNIClient(base_url="http://api.test/api", session=Session(user_id=1, token="tok"))
    client.get_latest_draft = AsyncMock(return_value=None)
    client.create_draft = AsyncMock(
        side_effect=lambda form_type, data, step: remote_draft("d1", data, step, form_type)
    )
    client.update_draft = AsyncMock(
        side_effect=lambda draft_id, data, step: remote_draft(draft_id, data, step)
    )
    client.delete_draft = AsyncMock(return_value=None)
    client.submit_draft = AsyncMock(return_value={"id": "listing-1", "status": "pending"})
    client.upload_media = AsyncMock(side_effect=lambda path: f"/media/{Path(path).name}")
    yield client
    await client.close()


@pytest.fixture
def store(tmp_path):
    return LocalDraftStore(tmp_path)


@pytest.fixture
def wizard(client, store):
    return DraftWizard(client, store, form_type="rental")


async def walk_to_preview(wizard):
    for fields in RENTAL_STEPS:
        await wizard.next(fields)


class TestNavigation:
    """Tests for moving between steps."""

    async def test_requires_login(self, client, store):
        client.session = Session()

        with pytest.raises(AuthRequiredError):
            DraftWizard(client, store)

    async def test_next_saves_locally_then_remotely(self, wizard, client, store):
        step = await wizard.next(RENTAL_STEPS[0])

        assert step == 2
        assert store.load(1)["current_step"] == 2
        assert store.load(1)["draft_id"] == "d1"
        client.create_draft.assert_awaited_once_with(
            "rental", {"property_type": "Apartment", "bhk_type": "2BHK"}, 2
        )

    async def test_incomplete_step_does_not_move(self, wizard, client, store):
        with pytest.raises(StepValidationError) as exc_info:
            await wizard.next({"property_type": "Apartment"})

        assert set(exc_info.value.errors) == {"bhk_type"}
        assert wizard.step == 1
        assert store.load(1) is None
        client.create_draft.assert_not_awaited()

    async def test_later_step_keeps_earlier_fields(self, wizard, client):
        for fields in RENTAL_STEPS[:4]:
            await wizard.next(fields)

        data = client.update_draft.await_args.args[1]
        assert data["city"] == "Pune"
        assert data["lift"] == "Yes"
        assert wizard.step == 5

    async def test_step_three_merge_keeps_city(self, client, store):
        wizard = DraftWizard(client, store, validator=lambda *args, **kwargs: {})
        await wizard.next({"property_type": "Apartment"})
        await wizard.next({"city": "Pune"})
        assert wizard.step == 3

        await wizard.next({"amenities": ["lift"]})

        saved = client.update_draft.await_args.args[1]
        assert saved == {"property_type": "Apartment", "city": "Pune", "amenities": ["lift"]}
        assert store.load(1)["data"] == saved

    async def test_back_never_goes_below_first_step(self, wizard):
        await wizard.next(RENTAL_STEPS[0])

        assert wizard.back() == 1
        assert wizard.back() == 1

    async def test_step_stops_at_preview(self, wizard):
        await walk_to_preview(wizard)

        assert await wizard.next() == 7

    async def test_cancelled_move_is_not_applied(self, wizard, client):
        token = CancellationToken()
        token.cancel()

        assert await wizard.next(RENTAL_STEPS[0], cancel_token=token) == 1
        assert wizard.data == {}
        client.create_draft.assert_not_awaited()


class TestRemoteFailures:
    """Tests for saving while the service misbehaves."""

    async def test_offline_save_keeps_user_moving(self, wizard, client, store):
        client.create_draft.side_effect = NetworkError("offline")

        step = await wizard.next(RENTAL_STEPS[0])

        assert step == 2
        assert wizard.remote_dirty is True
        assert wizard.last_error == "offline"
        assert store.load(1)["data"]["bhk_type"] == "2BHK"

    async def test_next_transition_retries(self, wizard, client):
        client.create_draft.side_effect = [
            NetworkError("offline"),
            remote_draft("d1", {}, 3),
        ]

        await wizard.next(RENTAL_STEPS[0])
        await wizard.next(RENTAL_STEPS[1])

        assert client.create_draft.await_count == 2
        assert wizard.draft_id == "d1"
        assert wizard.remote_dirty is False
        assert wizard.last_error is None

    async def test_draft_deleted_elsewhere_is_recreated(self, wizard, client):
        await wizard.next(RENTAL_STEPS[0])
        client.update_draft.side_effect = NotFoundError(404, "Draft not found")

        await wizard.next(RENTAL_STEPS[1])

        assert wizard.draft_id is None
        client.update_draft.side_effect = None
        await wizard.next(RENTAL_STEPS[2])
        assert client.create_draft.await_count == 2

    async def test_unchanged_state_is_not_resent(self, wizard, client):
        await wizard.next(RENTAL_STEPS[0])

        await wizard._save_remote(None)

        client.update_draft.assert_not_awaited()


class TestWriteOrdering:
    """Tests for overlapping transitions on one wizard."""

    async def test_rapid_next_calls_keep_every_field(self, wizard, client, store):
        saves = []

        async def slow_create(form_type, data, step):
            saves.append((step, data))
            await asyncio.sleep(0.05)
            return remote_draft("d1", data, step, form_type)

        async def slow_update(draft_id, data, step):
            saves.append((step, data))
            await asyncio.sleep(0.01)
            return remote_draft(draft_id, data, step)

        client.create_draft.side_effect = slow_create
        client.update_draft.side_effect = slow_update

        await asyncio.gather(
            wizard.next(RENTAL_STEPS[0]),
            wizard.next(RENTAL_STEPS[1]),
            wizard.next(RENTAL_STEPS[2]),
        )

        expected = {**RENTAL_STEPS[0], **RENTAL_STEPS[1], **RENTAL_STEPS[2]}
        assert wizard.step == 4
        assert wizard.data == expected
        assert store.load(1)["data"] == expected
        assert [step for step, _ in saves] == [2, 3, 4]
        assert saves[-1][1] == expected
        client.create_draft.assert_awaited_once()

    async def test_queued_step_is_validated_against_its_own_step(self, wizard, client):
        async def slow_create(form_type, data, step):
            await asyncio.sleep(0.02)
            return remote_draft("d1", data, step, form_type)

        client.create_draft.side_effect = slow_create

        results = await asyncio.gather(
            wizard.next(RENTAL_STEPS[0]),
            wizard.next({"city": "Pune"}),
            return_exceptions=True,
        )

        assert results[0] == 2
        assert isinstance(results[1], StepValidationError)
        assert set(results[1].errors) == {"state", "locality"}
        assert wizard.step == 2

    async def test_cancelled_save_keeps_server_id(self, wizard, client, store):
        token = CancellationToken()

        async def create_then_cancel(form_type, data, step):
            token.cancel()
            return remote_draft("d1", data, step, form_type)

        client.create_draft.side_effect = create_then_cancel

        await wizard.next(RENTAL_STEPS[0], cancel_token=token)

        assert wizard.draft_id == "d1"
        assert wizard.remote_dirty is True
        assert store.load(1)["draft_id"] == "d1"

        await wizard.next(RENTAL_STEPS[1])

        client.create_draft.assert_awaited_once()
        assert client.update_draft.await_args.args[0] == "d1"
        assert wizard.remote_dirty is False

    async def test_next_queued_behind_discard_starts_fresh(self, wizard, client):
        client.get_latest_draft.return_value = remote_draft("d9", {"city": "Delhi"}, 3)
        await wizard.start()

        async def slow_delete(draft_id):
            await asyncio.sleep(0.02)

        client.delete_draft.side_effect = slow_delete

        await asyncio.gather(wizard.discard_and_restart(), wizard.next(RENTAL_STEPS[0]))

        client.delete_draft.assert_awaited_once_with("d9")
        assert wizard.data == RENTAL_STEPS[0]
        assert wizard.step == 2
        client.create_draft.assert_awaited_once()
        client.update_draft.assert_not_awaited()


class TestResume:
    """Tests for picking up an unfinished draft."""

    async def test_nothing_to_resume(self, wizard):
        assert await wizard.start() is None

    async def test_remote_draft_wins(self, wizard, client, store):
        store.save(1, {"draft_id": "old", "current_step": 2, "data": {"city": "Delhi"}})
        client.get_latest_draft.return_value = remote_draft("d9", {"city": "Pune"}, 3)

        offer = await wizard.start()

        assert offer.draft_id == "d9"
        assert offer.from_remote is True
        assert offer.progress == 43
        assert offer.step_label == "Pricing"
        assert offer.pending_media == []

    async def test_pending_media_survives_for_same_draft(self, wizard, client, store):
        store.save(1, {"draft_id": "d9", "current_step": 5, "data": {}, "pending_media": ["/tmp/a.jpg"]})
        client.get_latest_draft.return_value = remote_draft("d9", {}, 5)

        offer = await wizard.start()

        assert offer.pending_media == ["/tmp/a.jpg"]

    async def test_local_draft_used_when_offline(self, wizard, client, store):
        store.save(1, {"draft_id": "d1", "form_type": "sale", "current_step": 3, "data": {"city": "Pune"}})
        client.get_latest_draft.side_effect = NetworkError("offline")

        offer = await wizard.start()
        step = wizard.continue_draft()

        assert offer.from_remote is False
        assert step == 3
        assert wizard.form_type == "sale"
        assert wizard.remote_dirty is True

    async def test_continue_then_next_updates_same_draft(self, wizard, client):
        client.get_latest_draft.return_value = remote_draft(
            "d9", {"property_type": "Apartment", "bhk_type": "2BHK"}, 2
        )
        await wizard.start()
        wizard.continue_draft()

        await wizard.next(RENTAL_STEPS[1])

        assert client.update_draft.await_args.args[0] == "d9"
        client.create_draft.assert_not_awaited()

    async def test_discard_deletes_and_restarts(self, wizard, client, store):
        store.save(1, {"draft_id": "d9", "current_step": 4, "data": {}})
        client.get_latest_draft.return_value = remote_draft("d9", {}, 4)
        await wizard.start()

        await wizard.discard_and_restart()

        client.delete_draft.assert_awaited_once_with("d9")
        assert store.load(1) is None
        assert wizard.step == 1
        assert wizard.draft_id is None


class TestSubmit:
    """Tests for the terminal transitions."""

    async def test_submit_uploads_media_and_clears_cache(self, wizard, client, store, tmp_path):
        photo = tmp_path / "front.jpg"
        photo.write_bytes(b"jpeg")
        await walk_to_preview(wizard)
        await wizard.add_media(photo)

        listing = await wizard.submit()

        assert listing["id"] == "listing-1"
        assert wizard.data["images"] == ["/media/front.jpg"]
        assert wizard.pending_media == []
        client.submit_draft.assert_awaited_once_with("d1")
        assert client.update_draft.await_args.args[1]["images"] == ["/media/front.jpg"]
        assert store.load(1) is None
        assert wizard.status == WizardStatus.SUBMITTED

    async def test_submit_before_preview_is_refused(self, wizard):
        await wizard.next(RENTAL_STEPS[0])

        with pytest.raises(StepValidationError):
            await wizard.submit()

    async def test_failed_submit_keeps_draft(self, wizard, client, store):
        await walk_to_preview(wizard)
        client.submit_draft.side_effect = NetworkError("offline")

        with pytest.raises(NetworkError):
            await wizard.submit()

        assert wizard.status == WizardStatus.EDITING
        assert wizard.step == 7
        assert store.load(1)["data"]["expected_rent"] == 25000

    async def test_unreadable_media_keeps_draft(self, wizard, client, store):
        await walk_to_preview(wizard)
        await wizard.add_media("/nowhere/front.jpg")
        client.upload_media.side_effect = MediaFileError("Cannot read front.jpg")

        with pytest.raises(MediaFileError):
            await wizard.submit()

        assert wizard.status == WizardStatus.EDITING
        assert wizard.pending_media == ["/nowhere/front.jpg"]
        assert store.load(1)["pending_media"] == ["/nowhere/front.jpg"]
        client.submit_draft.assert_not_awaited()

    async def test_delete_closes_wizard(self, wizard, client, store):
        await wizard.next(RENTAL_STEPS[0])

        await wizard.delete()

        client.delete_draft.assert_awaited_once_with("d1")
        assert store.load(1) is None
        with pytest.raises(DraftClosedError):
            wizard.back()

    async def test_submitted_wizard_is_closed(self, wizard):
        await walk_to_preview(wizard)
        await wizard.submit()

        with pytest.raises(DraftClosedError):
            await wizard.next({})


def test_write_queue_hands_out_one_lock_per_user():
    queue = DraftWriteQueue()

    assert queue.lock_for(1) is queue.lock_for(1)
    assert queue.lock_for(1) is not queue.lock_for(2)
