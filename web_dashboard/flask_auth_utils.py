#!/usr/bin/env python3
"""
Flask Authentication Utilities
==============================

Helper functions for Flask routes to extract user information from the
Supabase access token. The token is read from an ``Authorization: Bearer``
header or, for browser sessions, the ``auth_token`` cookie.
"""

import base64
import json
import logging
import time
from functools import wraps
from typing import Callable, Dict, Optional

from flask import g, jsonify, request

logger = logging.getLogger(__name__)


def get_auth_token() -> Optional[str]:
    """Get the access token from the Authorization header or auth cookies"""
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get('auth_token') or request.cookies.get('session_token')


def _decode_jwt_token(token: str) -> Optional[Dict]:
    """Decode JWT payload without verification (for extracting user_id/exp)"""
    try:
        token_parts = token.split('.')
        if len(token_parts) < 2:
            return None
        payload = token_parts[1]
        payload += '=' * (-len(payload) % 4)  # Add padding if needed
        decoded = base64.urlsafe_b64decode(payload)
        data = json.loads(decoded)
        return data if isinstance(data, dict) else None
    except (ValueError, TypeError) as e:
        logger.debug(f"Failed to decode JWT token: {e}")
        return None


def get_user_id_flask() -> Optional[str]:
    """Extract user ID from the request token (Flask context).

    Returns None when there is no token, it cannot be decoded, or it has expired.
    """
    token = get_auth_token()
    if not token:
        return None

    user_data = _decode_jwt_token(token)
    if not user_data:
        logger.warning("Could not decode auth token payload")
        return None

    exp = user_data.get('exp', 0)
    if isinstance(exp, (int, float)) and 0 < exp < time.time():
        logger.debug("Auth token expired")
        return None

    # Supabase uses 'sub', our session uses 'user_id'
    return user_data.get('sub') or user_data.get('user_id')


def require_user(f: Callable) -> Callable:
    """Route decorator: 401 unless the request carries a user id, else sets g.user_id"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user_id = get_user_id_flask()
        if not user_id:
            return jsonify({"error": "Authentication required"}), 401
        g.user_id = user_id
        return f(*args, **kwargs)
    return decorated_function
