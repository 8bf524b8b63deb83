"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "...", "code": "ALREADY_BOOKED"}

Usage:
    from utils.api_response import api_success, api_error, api_outcome

    return api_success(data={'id': 1}, message='예약이 접수되었습니다')
    return api_error('요청 데이터가 필요합니다', status=400)
    return api_outcome(create_booking(...), data_key='reservation')
"""

from flask import jsonify
from typing import Any

# HTTP status per booking outcome code
OUTCOME_STATUS = {
    'VALIDATION_FAILED': 400,
    'RULE_VIOLATION': 400,
    'PRE_OPEN': 403,
    'SEASON_CLOSED': 403,
    'ALREADY_BOOKED': 409,
    'CONCURRENT_REQUEST': 409,
    'INVALID_TRANSITION': 409,
    'FORBIDDEN': 403,
    'NOT_FOUND': 404,
}


def api_success(
    data: dict | list | None = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., code, conflicts).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_outcome(result: dict, data_key: str, status: int = 200) -> tuple:
    """
    Translate a service result dict into a JSON response.

    Service results are either {'success': True, <data_key>: {...}, 'message'?}
    or {'success': False, 'error': CODE, 'message': str}.

    Args:
        result: Result dict returned by a service function.
        data_key: Key holding the payload on success.
        status: HTTP status code on success.

    Returns:
        Tuple of (Response, status_code)
    """
    if result.get('success'):
        extra = {k: v for k, v in result.items() if k not in ('success', data_key, 'message')}
        return api_success(data=result.get(data_key), message=result.get('message'),
                           status=status, **extra)

    code = result.get('error', 'VALIDATION_FAILED')
    return api_error(result.get('message') or code, status=OUTCOME_STATUS.get(code, 400), code=code)
