"""Constants for the GitHub Git Data API."""

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"

# Literal framing of a create-blob request body; the base64 content goes in between
BLOB_BODY_PREFIX = b'{"encoding":"base64","content":"'
BLOB_BODY_SUFFIX = b'"}'

# Multiple of 3 so full chunks encode without leftover bytes
DEFAULT_BLOB_CHUNK_SIZE = 3 * 64 * 1024

DEFAULT_UPLOAD_CONCURRENCY = 4

# Git tree entry modes
FILE_MODE_REGULAR = "100644"
FILE_MODE_EXECUTABLE = "100755"

# Status codes GitHub uses when a ref update is not a fast-forward
REF_UPDATE_REJECTED_STATUSES: frozenset[int] = frozenset({409, 422})
