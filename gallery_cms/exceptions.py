"""Error taxonomy shared by the store, the services and the admin orchestrator"""


class GalleryError(Exception):
    """Base class for every error raised by gallery_cms"""


class StoreUnavailable(GalleryError):
    """The store is unconfigured, unreachable or failed to answer.

    Recoverable by retrying once the configuration or network is fixed.
    """


class ValidationRejected(GalleryError):
    """Input violated a required-field, type or uniqueness constraint"""


class DuplicateKey(ValidationRejected):
    """A unique key (page slug, setting name) is already taken"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFound(GalleryError):
    """The operation targeted an identifier that does not exist"""

    def __init__(self, table: str, entity_id: object):
        super().__init__(f"No record with id {entity_id} in {table}")
        self.table = table
        self.entity_id = entity_id


class InvalidTransition(GalleryError):
    """An admin action was attempted from a state that does not allow it"""


class ImageUploadFailed(GalleryError):
    """The image storage collaborator could not store the bytes"""
