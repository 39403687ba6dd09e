"""Constants shared across the licensed installer modules."""

from __future__ import annotations

GITHUB_OWNER = "licensee"
GITHUB_REPO_NAME = "licensed"
GITHUB_REPO = f"{GITHUB_OWNER}/{GITHUB_REPO_NAME}"
DEFAULT_API_URL = "https://api.github.com"
API_URL_ENV = "GITHUB_API_URL"

RELEASES_PER_PAGE = 100
GITHUB_JSON_MEDIA_TYPE = "application/vnd.github+json"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"
GITHUB_API_VERSION = "2022-11-28"

MAX_RETRY_COUNT = 5
DEFAULT_SECONDARY_RETRY_AFTER = 60

ARCHIVE_FILE_NAME = "licensed.tar.gz"
ARCHIVE_ENTRY = "./licensed"
TEMP_ROOT_ENV = "RUNNER_TEMP"
TEMP_DIR_PREFIX = "licensed-"
