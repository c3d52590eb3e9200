"""Response schemas for the Management API endpoints in use

Every response body is checked against one of these before any field is
read from it.
"""

from typing import Any, Dict

import jsonschema

from ..api.exceptions import ResponseValidationError

_NULLABLE_STRING = {"type": ["string", "null"]}

_ASSET_ENTRY = {
    "type": "object",
    "required": ["uid"],
    "properties": {
        "uid": {"type": "string", "minLength": 1},
        "title": _NULLABLE_STRING,
        "name": _NULLABLE_STRING,
        "filename": _NULLABLE_STRING,
        "url": _NULLABLE_STRING,
        "parent_uid": _NULLABLE_STRING,
        "is_dir": {"type": "boolean"},
    },
}

ASSET_LIST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["assets"],
    "properties": {
        "assets": {"type": "array", "items": _ASSET_ENTRY},
        "count": {"type": "integer"},
    },
}

FOLDER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["asset"],
    "properties": {
        "notice": {"type": "string"},
        "asset": {
            "type": "object",
            "required": ["uid", "name"],
            "properties": {
                "uid": {"type": "string", "minLength": 1},
                "name": {"type": "string"},
                "parent_uid": _NULLABLE_STRING,
            },
        },
    },
}

ASSET_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["asset"],
    "properties": {
        "notice": {"type": "string"},
        "asset": {
            "allOf": [
                _ASSET_ENTRY,
                {
                    "required": ["url"],
                    "properties": {"url": {"type": "string", "minLength": 1}},
                },
            ],
        },
    },
}

_EXTENSION_ENTRY = {
    "type": "object",
    "required": ["uid", "title"],
    "properties": {
        "uid": {"type": "string", "minLength": 1},
        "title": {"type": "string"},
        "type": {"type": "string"},
        "src": {"type": "string"},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
}

EXTENSION_LIST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["extensions"],
    "properties": {
        "extensions": {"type": "array", "items": _EXTENSION_ENTRY},
    },
}

EXTENSION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["extension"],
    "properties": {
        "notice": {"type": "string"},
        "extension": _EXTENSION_ENTRY,
    },
}

NOTICE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "notice": {"type": "string"},
    },
}

ERROR_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "error_message": {"type": "string"},
        "error_code": {"type": ["integer", "string"]},
        "errors": {"type": ["object", "array"]},
    },
}


def validate_response(endpoint: str, data: Any, schema: Dict[str, Any], status_code: int = -1) -> Dict[str, Any]:
    """
    Validate a decoded response body

    Args:
        endpoint: Human readable endpoint name for error messages
        data: Decoded JSON body
        schema: Schema for this endpoint
        status_code: HTTP status of the response

    Returns:
        The same data, known to match the schema

    Raises:
        ResponseValidationError: If the body does not match
    """
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "body"
        raise ResponseValidationError(endpoint, f"{location}: {e.message}", status_code)
    return data


def error_message_from(data: Any) -> str:
    """Extract the API error message from an error body, if it has one"""
    try:
        jsonschema.validate(data, ERROR_SCHEMA)
    except jsonschema.ValidationError:
        return ""
    if isinstance(data, dict):
        return data.get("error_message", "")
    return ""
