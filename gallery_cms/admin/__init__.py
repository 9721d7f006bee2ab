"""Admin orchestration: forms, image intake and the editor state machine"""

from gallery_cms.admin.forms import (
    PAGE_FORM,
    PAINTING_FORM,
    SETTING_FORM,
    EntityForm,
    FormState,
    JsonField,
)
from gallery_cms.admin.images import DataUriUploader, ImageUploader, to_data_uri
from gallery_cms.admin.orchestrator import (
    AdminPanel,
    AdminState,
    EntityAdmin,
    EntityKind,
    Notice,
)

__all__ = [
    "AdminPanel",
    "AdminState",
    "EntityAdmin",
    "EntityKind",
    "Notice",
    "EntityForm",
    "FormState",
    "JsonField",
    "PAINTING_FORM",
    "PAGE_FORM",
    "SETTING_FORM",
    "DataUriUploader",
    "ImageUploader",
    "to_data_uri",
]
