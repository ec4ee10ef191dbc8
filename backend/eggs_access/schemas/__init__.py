from .identity import (
    ApplicationUser,
    DirectoryRecord,
    Identity,
    UnreadableRecord,
    parse_directory_rows,
)
from .reset import (
    ResetPreview,
    ResetPreviewResponse,
    ResetRequest,
    ResetResult,
    format_data_label,
)

__all__ = [
    "ApplicationUser",
    "DirectoryRecord",
    "Identity",
    "ResetPreview",
    "ResetPreviewResponse",
    "ResetRequest",
    "ResetResult",
    "UnreadableRecord",
    "format_data_label",
    "parse_directory_rows",
]
