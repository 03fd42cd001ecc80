"""Project-wide constants for the Parley server."""

PROJECT_NAME = "Parley"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

HUB_PATH = "/chathub"
UPLOADS_URL_PATH = "/uploads"
