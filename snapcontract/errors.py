"""Error taxonomy for share links and document export.

Every error here is recoverable: the API layer maps them to responses that
leave the caller in a safe authoring state.
"""

from typing import Optional


class ContractAppError(Exception):
    """Base class for application errors"""

    detail = "Contract request failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class ShareLinkError(ContractAppError):
    """Inbound share link was rejected"""

    detail = "The shared contract link could not be opened"


class MalformedShareData(ShareLinkError):
    """Compact record present but not parseable as structured data"""

    detail = "The shared contract data is malformed"


class InvalidShareLink(ShareLinkError):
    """Compression or decompression of the share payload failed"""

    detail = "The shared contract link is invalid or corrupted"


class ExportFailure(ContractAppError):
    """Layout measurement, rasterization or pagination failed"""

    detail = "Failed to generate PDF. Please try again."


class ExportInProgress(ContractAppError):
    """A mutating action was attempted while an export snapshot is in flight"""

    detail = "Contract is being exported; editing is disabled until it finishes"
