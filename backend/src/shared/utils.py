"""
Common utility functions for Lambda handlers.
"""
import json
import re
from decimal import Decimal
from typing import Any, Dict

from .errors import ReviewError
from .logging import logger


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types from DynamoDB."""

    def default(self, o):
        if isinstance(o, Decimal):
            # Convert to int if it's a whole number, otherwise float
            if o % 1 == 0:
                return int(o)
            return float(o)
        if isinstance(o, set):
            return sorted(o)
        return super().default(o)


def format_response(
    status_code: int,
    body: Any,
    headers: Dict[str, str] = None
) -> Dict[str, Any]:
    """
    Format a standard API Gateway response with CORS headers.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON serialized)
        headers: Additional headers to include

    Returns:
        API Gateway response dict
    """
    default_headers = {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Credentials': True,
        'Content-Type': 'application/json'
    }

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'headers': default_headers,
        'body': json.dumps(body, cls=DecimalEncoder)
    }


def error_response(error: ReviewError) -> Dict[str, Any]:
    """Map a workflow error to its API Gateway response."""
    return format_response(error.status_code, error.to_dict())


def server_error_response(error: Exception, action: str) -> Dict[str, Any]:
    """Log an unexpected failure and return a generic 500 (never the raw error)."""
    logger.exception(f"Error {action}: {error}")
    return format_response(500, {'error': 'Internal server error'})


def parse_body(event: dict) -> dict:
    """
    Safely parse JSON body from API Gateway event.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        Parsed body dict or empty dict if invalid
    """
    try:
        body = event.get('body') or '{}'
        if isinstance(body, str):
            body = json.loads(body)
        return body if isinstance(body, dict) else {}
    except (json.JSONDecodeError, TypeError):
        return {}


def get_path_param(event: dict, param_name: str) -> str:
    """Extract path parameter from event."""
    try:
        return event['pathParameters'][param_name]
    except (KeyError, TypeError):
        return None


def get_query_param(event: dict, param_name: str, default: str = None) -> str:
    """Extract query string parameter from event."""
    try:
        params = event.get('queryStringParameters') or {}
        return params.get(param_name, default)
    except (KeyError, TypeError, AttributeError):
        return default


def to_snake_case(name: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def to_api(item: Dict[str, Any], id_field: str = None) -> Dict[str, Any]:
    """
    Convert a stored DynamoDB item (camelCase) to the API shape (snake_case).

    Args:
        item: Stored item
        id_field: Attribute exposed as 'id' (e.g. 'reviewId')
    """
    if item is None:
        return None

    result = {}
    for key, value in item.items():
        if key == id_field:
            result['id'] = value
        elif key == 'neighbourhoodKey':
            continue  # index-only attribute
        else:
            result[to_snake_case(key)] = value
    return result
