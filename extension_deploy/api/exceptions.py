"""Exception definitions for extension-deploy API"""

from typing import Optional

from ..constants import ErrorCode


class ExtensionDeployError(Exception):
    """Base exception for extension-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(ExtensionDeployError):
    """Descriptor or build log could not be loaded"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class EntryPointError(ExtensionDeployError):
    """Entry point could not be read or written"""

    def __init__(self, path: str, reason: str):
        message = f"Entry point {path} is not usable: {reason}"
        super().__init__(message, ErrorCode.ENTRY_POINT_ERROR)
        self.path = path


class RemoteError(ExtensionDeployError):
    """A Management API call failed

    Carries the remote status code and status text. Transport failures
    (no response at all) use status code -1.
    """

    def __init__(self,
                 message: str,
                 status_code: int = -1,
                 status_text: str = "",
                 error_code: str = ErrorCode.REMOTE_REQUEST_FAILED):
        super().__init__(message, error_code)
        self.status_code = status_code
        self.status_text = status_text


class ResponseValidationError(RemoteError):
    """Response body did not match the endpoint schema"""

    def __init__(self, endpoint: str, reason: str, status_code: int = -1):
        message = f"Unexpected response from {endpoint}: {reason}"
        super().__init__(
            message,
            status_code=status_code,
            status_text="Invalid response body",
            error_code=ErrorCode.RESPONSE_VALIDATION_FAILED,
        )
        self.endpoint = endpoint


class FolderResolutionError(ExtensionDeployError):
    """Destination folder could not be found or created"""

    def __init__(self, folder_name: str, cause: Optional[Exception] = None):
        message = f"Could not resolve asset folder '{folder_name}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, ErrorCode.FOLDER_RESOLUTION_FAILED)
        self.folder_name = folder_name
        self.cause = cause


class AssetUploadError(ExtensionDeployError):
    """An asset could not be uploaded"""

    def __init__(self, file_path: str, cause: Optional[Exception] = None):
        message = f"Upload failed for {file_path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, ErrorCode.ASSET_UPLOAD_FAILED)
        self.file_path = file_path
        self.cause = cause


class UnresolvedReferenceError(ExtensionDeployError):
    """A reference has no uploaded asset to point at"""

    def __init__(self, key: str, literal: str):
        message = f"Reference '{key}' ({literal}) did not resolve to an uploaded asset"
        super().__init__(message, ErrorCode.UNRESOLVED_REFERENCE)
        self.key = key
        self.literal = literal
