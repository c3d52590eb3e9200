"""Global constants for extension-deploy"""

from enum import Enum

APP_NAME = "extension-deploy"
LOG_FORMAT = "%(message)s"
LOGGER_NAME = "extension_deploy"

# Descriptor defaults
DEFAULT_ENTRY_POINT = "index.html"
DEFAULT_DASHBOARD_WIDTH = "full"
DASHBOARD_WIDTHS = ["full", "half"]
DEFAULT_TAGS = ["custom-field", "react"]
DEFAULT_UPLOAD_WORKERS = 4
MAX_UPLOAD_WORKERS = 32
DESCRIPTOR_REF_KEY = "ref"
MAX_REF_DEPTH = 8
YAML_SUFFIXES = (".yaml", ".yml")

# Remote API
API_VERSION_PREFIX = "/v3"
ASSETS_PATH = "/assets"
FOLDERS_PATH = "/assets/folders"
EXTENSIONS_PATH = "/extensions"
ASSET_PAGE_SIZE = 100
HEADER_API_KEY = "api_key"
HEADER_AUTHORIZATION = "authorization"
UPLOAD_FIELD = "asset[upload]"
PARENT_UID_FIELD = "asset[parent_uid]"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Retry / timeout defaults
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_INITIAL_DELAY = 0.5  # seconds
DEFAULT_RETRY_MAX_DELAY = 8.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Environment variables
ENV_BASE_URL = "CS_CM_API_BASE_URL"
ENV_API_KEY = "CS_API_KEY"
ENV_MANAGEMENT_TOKEN = "CS_MANAGEMENT_TOKEN"
DEFAULT_BASE_URL = "https://api.contentstack.io"


class ExtensionKind(Enum):
    """Kinds of extension records the pipeline can register"""
    FIELD = "field"
    WIDGET = "widget"
    DASHBOARD = "dashboard"


class PipelineStage(Enum):
    """Pipeline states, in execution order"""
    IDLE = "idle"
    RESOLVING_REFERENCES = "resolving_references"
    SYNCHRONIZING_ASSETS = "synchronizing_assets"
    REGISTERING_EXTENSION = "registering_extension"
    PURGING = "purging"
    SKIPPED = "skipped"
    DONE = "done"
    FAILED = "failed"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "ED001"
    ENTRY_POINT_ERROR = "ED002"
    FOLDER_RESOLUTION_FAILED = "ED003"
    ASSET_UPLOAD_FAILED = "ED004"
    UNRESOLVED_REFERENCE = "ED005"
    REMOTE_REQUEST_FAILED = "ED006"
    RESPONSE_VALIDATION_FAILED = "ED007"
    REGISTRATION_FAILED = "ED008"
    PURGE_FAILED = "ED009"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"

# Messages templates
MSG_LOG_PREFIX = "[{name}] :: {message}"
MSG_COMPLETED = f"{EMOJI_SUCCESS} Deployment of {{name}} completed!"
MSG_FAILED = f"{EMOJI_ERROR} Deployment of {{name}} failed: {{error}}"
MSG_NOTHING_TO_PURGE = "Nothing to purge. Done!"
