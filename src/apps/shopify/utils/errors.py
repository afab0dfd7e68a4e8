class WorkflowError(Exception):
    """Base exception for product workflow errors."""

    pass


class ValidationError(WorkflowError):
    """Input categories are missing, out of bounds or malformed."""

    pass


class ConfigurationError(WorkflowError):
    """Required credentials are not configured."""

    pass


class GenerationError(WorkflowError):
    """A single product generation call failed and may be retried."""

    pass


class PlaceholderImageDetected(WorkflowError):
    """Raised inside the generation retry loop when an image looks like a placeholder."""

    def __init__(self, message: str, product=None):
        super().__init__(message)
        self.product = product


class ProductCreationError(WorkflowError):
    """Product creation stopped early; carries the products created before the failure."""

    def __init__(self, message: str, created: list | None = None, processed: int = 0):
        super().__init__(message)
        self.created = created or []
        # number of input products handled (created or skipped) before the failure
        self.processed = processed


class ImageUploadError(WorkflowError):
    """One or more product images could not be attached."""

    def __init__(self, failed_product_ids: list[str], total: int):
        self.failed_product_ids = failed_product_ids
        self.total = total
        ids = ", ".join(failed_product_ids)
        super().__init__(f"{len(failed_product_ids)} of {total} product images failed to upload (product ids: {ids})")
