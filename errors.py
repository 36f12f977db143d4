"""
Error taxonomy shared by the catalogue components.

Core classes raise these; gallery.Gallery turns them into failed Outcomes.
"""


class GalleryError(Exception):
    """Base class for every catalogue error reported to the caller."""
    kind = "error"


class ValidationError(GalleryError):
    """A supplied field is malformed."""
    kind = "validation"


class NotFoundError(GalleryError):
    """No record or hidden title matched."""
    kind = "not_found"


class DuplicateError(GalleryError):
    """The entry already exists (name+folder collision, already hidden)."""
    kind = "duplicate"


class IOFailure(GalleryError):
    """A durable artifact could not be read or written."""
    kind = "io"


class PersistenceWarning(UserWarning):
    """Category label for corrupt catalogue lines skipped on load."""
