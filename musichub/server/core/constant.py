PROJECT_NAME = "MusicHub API"
API_PREFIX = "/api"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
