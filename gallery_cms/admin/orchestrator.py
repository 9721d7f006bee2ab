"""Admin editor state machine, shared by every entity kind.

Each ``EntityAdmin`` moves between BROWSING, CREATING, EDITING and
SUBMITTING. Lists are always re-fetched after a successful mutation; store
failures never escape as exceptions and become ``Notice`` entries instead,
leaving the user's form input untouched.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from gallery_cms.admin.forms import PAGE_FORM, PAINTING_FORM, SETTING_FORM, EntityForm, FormState
from gallery_cms.admin.images import DataUriUploader, ImageUploader, guess_content_type
from gallery_cms.entities import BaseEntity
from gallery_cms.exceptions import GalleryError, InvalidTransition
from gallery_cms.probe import ConnectivityProbe
from gallery_cms.repository import Repository
from gallery_cms.services import GalleryServices

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]
NoticeCallback = Callable[["Notice"], None]


class AdminState(str, Enum):
    BROWSING = "browsing"
    CREATING = "creating"
    EDITING = "editing"
    SUBMITTING = "submitting"


class EntityKind(str, Enum):
    PAINTINGS = "paintings"
    PAGES = "pages"
    SETTINGS = "settings"


@dataclass(frozen=True)
class Notice:
    level: str  # "error", "warning" or "info"
    message: str


class EntityAdmin[T: BaseEntity]:
    """List view plus create/edit form for one entity kind"""

    def __init__(
        self,
        service: Repository[T, Any, Any],
        form: EntityForm,
        label: str,
        confirm: ConfirmCallback,
        uploader: ImageUploader | None = None,
        on_notice: NoticeCallback | None = None,
    ):
        self.service = service
        self.form_definition = form
        self.label = label
        self.confirm = confirm
        self.uploader = uploader or DataUriUploader()
        self.on_notice = on_notice

        self.state = AdminState.BROWSING
        self.records: list[T] = []
        self.editing_record: T | None = None
        self.form: FormState = form.blank()
        self.notices: list[Notice] = []
        # Cleared by AdminPanel when the store is not usable
        self.available = True

    @property
    def is_submitting(self) -> bool:
        return self.state is AdminState.SUBMITTING

    @property
    def form_open(self) -> bool:
        return self.state in (AdminState.CREATING, AdminState.EDITING)

    def _notify(self, level: str, message: str) -> None:
        notice = Notice(level, message)
        self.notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)

    def _require_form_open(self) -> None:
        if self.is_submitting:
            raise InvalidTransition(f"The {self.label} form is locked while saving")
        if not self.form_open:
            raise InvalidTransition(f"No {self.label} form is open")

    def _require_not_submitting(self) -> None:
        if self.is_submitting:
            raise InvalidTransition(f"A {self.label} is being saved")

    async def refresh(self) -> list[T]:
        """Re-read the list; on failure the previous list stays in place"""
        try:
            self.records = await self.service.get_all()
        except GalleryError as exc:
            logger.error("Error loading %s list: %s", self.label, exc)
            self._notify("error", f"Could not load the {self.label} list. Please try again.")
        return self.records

    def reset(self) -> None:
        """Discard the form and go back to the list"""
        self.form = self.form_definition.blank()
        self.editing_record = None
        self.state = AdminState.BROWSING

    def cancel(self) -> None:
        self._require_not_submitting()
        self.reset()

    def start_create(self) -> None:
        self._require_not_submitting()
        self.form = self.form_definition.blank()
        self.editing_record = None
        self.state = AdminState.CREATING

    def start_edit(self, record: T) -> None:
        self._require_not_submitting()
        self.form = self.form_definition.hydrate(record)
        self.editing_record = record
        self.state = AdminState.EDITING

    def set_field(self, name: str, value: Any) -> None:
        self._require_form_open()
        self.form.set(name, value)

    def edit_json(self, name: str, text: str) -> bool:
        """Feed raw JSON text; returns whether it parsed"""
        self._require_form_open()
        return self.form.edit_json(name, text)

    async def attach_image(
        self, data: bytes, filename: str | None = None, content_type: str | None = None
    ) -> bool:
        """Store an image and put its URL into the form's image field"""
        self._require_form_open()
        field = self.form_definition.image_field
        if field is None:
            raise ValueError(f"The {self.label} form has no image field")

        content_type = content_type or guess_content_type(filename)
        try:
            url = await self.uploader.upload_image(data, content_type)
        except GalleryError as exc:
            logger.error("Error uploading image for %s: %s", self.label, exc)
            self._notify("error", "Error uploading image. Please try again.")
            return False
        self.form.set(field, url)
        return True

    async def submit(self) -> bool:
        """Create or update from the form.

        On success the list is re-fetched and the form cleared. On failure
        the form is left as it was and a notice explains what went wrong.
        """
        if self.is_submitting:
            raise InvalidTransition(f"A {self.label} is already being saved")
        if not self.form_open:
            raise InvalidTransition(f"No {self.label} form is open")
        if not self.available:
            self._notify("error", "The store is not configured. Complete the setup first.")
            return False

        for name in self.form.invalid_json_fields:
            self._notify(
                "warning",
                f"{name} contains invalid JSON; the last valid content will be saved.",
            )

        previous_state = self.state
        self.state = AdminState.SUBMITTING
        try:
            if previous_state is AdminState.EDITING and self.editing_record is not None:
                payload = self.form_definition.update_payload(self.form)
                await self.service.update(self.editing_record.id, payload)
            else:
                payload = self.form_definition.create_payload(self.form)
                await self.service.create(payload)
            await self.refresh()
        except GalleryError as exc:
            self.state = previous_state
            logger.error("Error saving %s: %s", self.label, exc)
            self._notify("error", f"Error saving {self.label}: {exc}")
            return False

        self.reset()
        return True

    async def delete(self, record: T) -> bool:
        """Delete ``record`` after the user confirms; declining changes nothing"""
        if not self.available:
            self._notify("error", "The store is not configured. Complete the setup first.")
            return False
        answer = self.confirm(f"Are you sure you want to delete this {self.label}?")
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            return False

        try:
            await self.service.delete(record.id)
        except GalleryError as exc:
            logger.error("Error deleting %s %s: %s", self.label, record.id, exc)
            self._notify("error", f"Error deleting {self.label}. Please try again.")
            return False
        await self.refresh()
        return True


class AdminPanel:
    """The three entity editors behind one connectivity gate.

    Switching kinds resets every form without asking, so unsaved edits in
    the other kinds are lost.
    """

    def __init__(
        self,
        services: GalleryServices,
        probe: ConnectivityProbe,
        confirm: ConfirmCallback,
        uploader: ImageUploader | None = None,
        on_notice: NoticeCallback | None = None,
    ):
        self.probe = probe
        self.admins: dict[EntityKind, EntityAdmin[Any]] = {
            EntityKind.PAINTINGS: EntityAdmin(
                services.paintings, PAINTING_FORM, "painting", confirm, uploader, on_notice
            ),
            EntityKind.PAGES: EntityAdmin(
                services.pages, PAGE_FORM, "page", confirm, on_notice=on_notice
            ),
            EntityKind.SETTINGS: EntityAdmin(
                services.settings, SETTING_FORM, "setting", confirm, on_notice=on_notice
            ),
        }
        self.active = EntityKind.PAINTINGS
        self.needs_setup = False

    @property
    def current(self) -> EntityAdmin[Any]:
        return self.admins[self.active]

    @property
    def paintings(self) -> EntityAdmin[Any]:
        return self.admins[EntityKind.PAINTINGS]

    @property
    def pages(self) -> EntityAdmin[Any]:
        return self.admins[EntityKind.PAGES]

    @property
    def settings(self) -> EntityAdmin[Any]:
        return self.admins[EntityKind.SETTINGS]

    async def open(self) -> bool:
        """Run the probe; load the active list only when the store is usable"""
        available = await self.probe.is_available()
        self.needs_setup = not available
        for admin in self.admins.values():
            admin.available = available
        if available:
            await self.current.refresh()
        else:
            logger.warning("Store unavailable; admin panel needs setup")
        return available

    def reset_all_forms(self) -> None:
        for kind, admin in self.admins.items():
            if admin.is_submitting:
                # Its own completion resets it
                logger.debug("Not resetting %s form while it is saving", kind.value)
                continue
            admin.reset()

    async def switch_to(self, kind: EntityKind | str) -> EntityAdmin[Any]:
        kind = EntityKind(kind)
        self.reset_all_forms()
        self.active = kind
        if not self.needs_setup:
            await self.current.refresh()
        return self.current
