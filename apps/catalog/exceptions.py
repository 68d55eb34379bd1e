"""
Errors raised by the catalog write path.

Every error carries a stable ``kind`` so the API and the staff form views can
report it without inspecting the message text.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""
    kind = 'catalog_error'

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_dict(self):
        return {
            'kind': self.kind,
            'field': self.field,
            'message': self.message,
        }


class CatalogValidationError(CatalogError):
    """A required field is missing or invalid."""
    kind = 'validation_error'


class NoValidVariants(CatalogValidationError):
    """Variants were requested but none survived filtering."""
    kind = 'no_valid_variants'

    def __init__(self, message='Add at least one valid variant.', field='variants'):
        super().__init__(message, field=field)


class InvalidPrice(CatalogValidationError):
    """No usable base price could be derived."""
    kind = 'invalid_price'

    def __init__(self, message='Enter a valid price or add at least one valid variant.', field='price'):
        super().__init__(message, field=field)


class UploadFailure(CatalogError):
    """None of the submitted files could be stored."""
    kind = 'upload_failure'

    def __init__(self, message='Upload failed.', field='files', failed=None):
        super().__init__(message, field=field)
        self.failed = list(failed or [])
