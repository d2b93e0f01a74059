PDF_EXTENSION = ".pdf"
PDF_MIME_TYPE = "application/pdf"
DEFAULT_MIME_TYPE = "application/octet-stream"

# Placeholder used in archived names when the old version is unknown
UNKNOWN_VERSION = "unknown"

SEARCH_FIELDS = "files(id,name,description)"
UPLOAD_FIELDS = "id"
MOVE_FIELDS = "id,parents"

# Applied best-effort to every freshly deployed file
SHARING_RESTRICTIONS = {
    "copyRequiresWriterPermission": True,
    "writersCanShare": False,
}
