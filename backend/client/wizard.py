"""
Multi-step property submission wizard.

Drives a draft through the seven posting steps. Every forward transition is
persisted twice: to the device-local cache first, then to the service.
The local write never waits on the network, and a failed remote write only
marks the draft dirty so the next transition retries it.
"""

import asyncio
import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from app.services.drafts import (
    TOTAL_STEPS,
    DraftStep,
    merge_draft_data,
    progress_percent,
    validate_step,
    validate_submission,
)
from client.api import HomeHNIClient
from client.cancellation import CancellationToken, is_cancelled
from client.errors import (
    AuthRequiredError,
    ClientError,
    DraftClosedError,
    NotFoundError,
    StepValidationError,
)
from client.local_store import LocalDraftStore

module_logger = logging.getLogger(__name__)


class WizardStatus(str, Enum):
    EDITING = "editing"
    SUBMITTED = "submitted"
    DELETED = "deleted"


@dataclass
class ResumeOffer:
    draft_id: str | None
    form_type: str
    current_step: int
    data: dict
    pending_media: list[str] = field(default_factory=list)
    from_remote: bool = True

    @property
    def progress(self) -> int:
        return progress_percent(self.current_step)

    @property
    def step_label(self) -> str:
        return DraftStep(self.current_step).label


class DraftWriteQueue:
    """Hands out one lock per user so that user's draft writes run in order."""

    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}

    def lock_for(self, user_id: int) -> asyncio.Lock:
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        return self._locks[user_id]


class DraftWizard:
    def __init__(
        self,
        client: HomeHNIClient,
        store: LocalDraftStore,
        form_type: str = "rental",
        queue: DraftWriteQueue | None = None,
        logger: logging.Logger | None = None,
        validator: Callable[..., dict[str, str]] = validate_step,
    ):
        if not client.session.authenticated:
            raise AuthRequiredError("Login required to post a property")

        self.client = client
        self.store = store
        self.queue = queue or DraftWriteQueue()
        self.logger = logger or module_logger
        self.validator = validator
        self.user_id = client.session.user_id

        self.form_type = form_type
        self.status = WizardStatus.EDITING
        self.step = 1
        self.draft_id: str | None = None
        self.data: dict = {}
        self.pending_media: list[str] = []
        self.resume_offer: ResumeOffer | None = None

        # Set when the service copy is behind the local one
        self.remote_dirty = False
        self.last_error: str | None = None
        self._local_snapshot: dict | None = None
        self._remote_snapshot: tuple[int, dict] | None = None

    # Loading

    async def start(self, cancel_token: CancellationToken | None = None) -> ResumeOffer | None:
        """Look for an unfinished draft. The service copy wins over the local one."""
        self._ensure_open()

        remote = None
        remote_reachable = True
        try:
            remote = await self.client.get_latest_draft()
        except ClientError as e:
            remote_reachable = False
            self.logger.warning(f"Could not load remote draft for user {self.user_id}: {e}")

        if is_cancelled(cancel_token):
            return None

        local = self.store.load(self.user_id)

        if remote:
            pending = []
            if local and local.get("draft_id") == remote["id"]:
                pending = list(local.get("pending_media") or [])
            offer = ResumeOffer(
                draft_id=remote["id"],
                form_type=remote["form_type"],
                current_step=remote["current_step"],
                data=remote.get("data") or {},
                pending_media=pending,
            )
        elif local:
            if remote_reachable:
                self.logger.info(f"Resuming unsynced local draft for user {self.user_id}")
            offer = ResumeOffer(
                draft_id=local.get("draft_id"),
                form_type=local.get("form_type") or self.form_type,
                current_step=local.get("current_step") or 1,
                data=local.get("data") or {},
                pending_media=list(local.get("pending_media") or []),
                from_remote=False,
            )
        else:
            return None

        self.resume_offer = offer
        return offer

    def continue_draft(self) -> int:
        """Pick up the offered draft at the step the user left."""
        self._ensure_open()
        offer = self.resume_offer
        if offer is None:
            return self.step

        self.draft_id = offer.draft_id
        self.form_type = offer.form_type
        self.data = dict(offer.data)
        self.pending_media = list(offer.pending_media)
        self.step = min(max(offer.current_step, 1), TOTAL_STEPS)
        self.resume_offer = None

        if offer.draft_id is None or not offer.from_remote:
            # The service copy is missing or may be behind
            self.remote_dirty = True
        else:
            self._remote_snapshot = (self.step, copy.deepcopy(self.data))
        return self.step

    async def discard_and_restart(self, cancel_token: CancellationToken | None = None) -> None:
        """Throw the offered draft away and begin again at step 1."""
        self._ensure_open()
        async with self.queue.lock_for(self.user_id):
            self._ensure_open()
            offer = self.resume_offer
            if offer and offer.draft_id:
                await self._delete_remote(offer.draft_id, cancel_token)
            self.store.clear(self.user_id)
            self._reset()

    # Navigation

    async def next(
        self, fields: dict | None = None, cancel_token: CancellationToken | None = None
    ) -> int:
        """Validate this step, merge its fields and move forward.

        Raises :class:`StepValidationError` without moving when the step is
        incomplete. Remote persistence failures never block the move.
        """
        self._ensure_open()
        async with self.queue.lock_for(self.user_id):
            # A call queued behind another transition sees its result
            self._ensure_open()
            merged = merge_draft_data(self.data, fields)
            errors = self.validator(
                self.step, self._with_pending_media(merged), self.form_type
            )
            if errors:
                raise StepValidationError(errors)

            if is_cancelled(cancel_token):
                return self.step
            self.data = merged
            self.step = min(self.step + 1, TOTAL_STEPS)
            self._save_local()
            await self._save_remote(cancel_token)
        return self.step

    def back(self) -> int:
        self._ensure_open()
        self.step = max(self.step - 1, 1)
        return self.step

    async def add_media(self, path: str | Path) -> None:
        """Queue a local image or video for upload at submission."""
        self._ensure_open()
        async with self.queue.lock_for(self.user_id):
            self._ensure_open()
            self.pending_media.append(str(path))
            self._save_local()

    # Terminal transitions

    async def submit(self, cancel_token: CancellationToken | None = None) -> dict:
        """Upload queued media and turn the draft into a pending listing.

        On any failure the wizard stays on the preview step with its data.
        """
        self._ensure_open()
        async with self.queue.lock_for(self.user_id):
            self._ensure_open()
            if self.step != TOTAL_STEPS:
                raise StepValidationError({"step": "Complete all steps before submitting"})

            errors = validate_submission(
                self._with_pending_media(self.data), self.form_type
            )
            if errors:
                raise StepValidationError(errors)

            await self._upload_pending_media(cancel_token)

            if cancel_token:
                cancel_token.raise_if_cancelled()
            await self._save_remote(cancel_token, raise_errors=True)

            if cancel_token:
                cancel_token.raise_if_cancelled()
            listing = await self.client.submit_draft(self.draft_id)

            self.store.clear(self.user_id)
            self.status = WizardStatus.SUBMITTED

        self.logger.info(f"Draft {self.draft_id} submitted as listing {listing['id']}")
        return listing

    async def delete(self, cancel_token: CancellationToken | None = None) -> None:
        self._ensure_open()
        async with self.queue.lock_for(self.user_id):
            self._ensure_open()
            if self.draft_id:
                await self._delete_remote(self.draft_id, cancel_token)
            if is_cancelled(cancel_token):
                return
            self.store.clear(self.user_id)
            self.status = WizardStatus.DELETED

    # Internals

    def _ensure_open(self) -> None:
        if self.status != WizardStatus.EDITING:
            raise DraftClosedError(f"Draft is already {self.status.value}")

    def _reset(self) -> None:
        self.step = 1
        self.draft_id = None
        self.data = {}
        self.pending_media = []
        self.resume_offer = None
        self.remote_dirty = False
        self._local_snapshot = None
        self._remote_snapshot = None

    def _with_pending_media(self, data: dict) -> dict:
        if not self.pending_media:
            return data
        images = list(data.get("images") or []) + self.pending_media
        return {**data, "images": images}

    def _save_local(self) -> None:
        snapshot = {
            "draft_id": self.draft_id,
            "form_type": self.form_type,
            "current_step": self.step,
            "data": self.data,
            "pending_media": self.pending_media,
        }
        if snapshot == self._local_snapshot:
            return
        self.store.save(self.user_id, snapshot)
        self._local_snapshot = copy.deepcopy(snapshot)

    async def _save_remote(
        self, cancel_token: CancellationToken | None, raise_errors: bool = False
    ) -> None:
        if not self.remote_dirty and self._remote_snapshot == (self.step, self.data):
            return

        step, data = self.step, copy.deepcopy(self.data)
        try:
            if self.draft_id is None:
                draft = await self.client.create_draft(self.form_type, data, step)
            else:
                draft = await self.client.update_draft(self.draft_id, data, step)
        except NotFoundError:
            # Gone on the server (deleted elsewhere); recreate next time
            self.logger.warning(f"Draft {self.draft_id} no longer exists remotely")
            self.draft_id = None
            self._mark_dirty("Draft not found on server")
            if raise_errors:
                raise
            return
        except ClientError as e:
            self.logger.warning(f"Saving draft for user {self.user_id} failed, will retry: {e}")
            self._mark_dirty(str(e))
            if raise_errors:
                raise
            return

        if is_cancelled(cancel_token):
            # Keep the server id so the next save updates this draft
            self.draft_id = draft["id"]
            self._mark_dirty("Save cancelled")
            self._save_local()
            return

        self.draft_id = draft["id"]
        self.remote_dirty = False
        self.last_error = None
        self._remote_snapshot = (step, data)
        self._save_local()

    def _mark_dirty(self, message: str) -> None:
        self.remote_dirty = True
        self.last_error = message

    async def _delete_remote(
        self, draft_id: str, cancel_token: CancellationToken | None
    ) -> None:
        if cancel_token:
            cancel_token.raise_if_cancelled()
        try:
            await self.client.delete_draft(draft_id)
        except NotFoundError:
            self.logger.info(f"Draft {draft_id} already gone")

    async def _upload_pending_media(self, cancel_token: CancellationToken | None) -> None:
        while self.pending_media:
            if cancel_token:
                cancel_token.raise_if_cancelled()
            path = self.pending_media[0]
            url = await self.client.upload_media(path)
            # Move one file at a time so a retry never uploads twice
            images = list(self.data.get("images") or [])
            images.append(url)
            self.data = {**self.data, "images": images}
            self.pending_media.pop(0)
            self._save_local()
