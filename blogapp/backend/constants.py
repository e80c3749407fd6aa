"""Auth state events and storage keys."""

from __future__ import annotations

AUTH_INITIAL_SESSION = "INITIAL_SESSION"
AUTH_SIGNED_IN = "SIGNED_IN"
AUTH_SIGNED_OUT = "SIGNED_OUT"
AUTH_TOKEN_REFRESHED = "TOKEN_REFRESHED"

STORAGE_KEY = "blogapp.auth.token"

# Error codes surfaced in AuthError / APIError
ERR_VALIDATION = "validation_failed"
ERR_USER_EXISTS = "user_already_exists"
ERR_INVALID_CREDENTIALS = "invalid_credentials"
ERR_SESSION_MISSING = "session_missing"
ERR_SESSION_REVOKED = "session_revoked"
ERR_UNEXPECTED = "unexpected_error"
ERR_NOT_AUTHENTICATED = "not_authenticated"
ERR_RLS = "row_level_security"
ERR_UNKNOWN_TABLE = "unknown_table"
ERR_UNKNOWN_COLUMN = "unknown_column"
ERR_MISSING_FILTER = "missing_filter"
ERR_DATABASE = "database_error"
ERR_READ_ONLY_COLUMN = "read_only_column"
ERR_INVALID_QUERY = "invalid_query"
