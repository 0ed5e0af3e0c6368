"""
Settings — Default configuration values for the ArchivesSpace resource migrator.

This module provides the DEFAULT_SETTINGS dict that sync_config uses as
fallback values when an event (or .env file) does not set a value. The
defaults match a daily incremental sync against two ArchivesSpace instances.

Configuration precedence (highest to lowest):
  1. CLI flags (--recent-only, --skip-existing, --dry-run, --debug)
  2. Event payload (JSON file, serverless event) or environment variables
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  ID_GENERATOR    Matching identifier strategy ("smushed" or "four_part")
  RECENT_ONLY     Only migrate resources modified in the last day
  SKIP_EXISTING   Leave destination resources alone when a match exists
  DRY_RUN         Log deletes and imports instead of issuing them
  PAGE_SIZE       Page size for the source resource listing
  THROTTLE        Seconds to sleep between paged source requests
  TIMEOUT         Per-request HTTP timeout in seconds
  DEBUG           Verbose (DEBUG level) logging
"""

DEFAULT_SETTINGS = {
    "ID_GENERATOR": "smushed",
    "RECENT_ONLY": False,
    "SKIP_EXISTING": False,
    "DRY_RUN": False,
    "PAGE_SIZE": 50,
    "THROTTLE": 0,
    "TIMEOUT": 30,
    "DEBUG": False,
}

# Session token header set after POST /users/{username}/login
SESSION_HEADER = "X-ArchivesSpace-Session"

# Query parameters for GET resource_descriptions/{id}.xml
EAD_EXPORT_PARAMS = {
    "include_unpublished": "false",
    "include_daos": "true",
    "numbered_cs": "true",
    "print_pdf": "false",
}

# Destination endpoints (relative paths are prefixed with the repository scope)
CONVERTER_PATH = "plugins/jsonmodel_from_format/resource/ead"
FIND_BY_ID_PATH = "find_by_id/resources"
BATCH_IMPORT_PATH = "batch_imports"

# Error value returned by the backend when the converter plugin route is missing
CONVERTER_MISSING_ERROR = "Sinatra::NotFound"

# Seconds in the recent_only modification window
RECENT_WINDOW_SECONDS = 24 * 60 * 60
