"""Utility functions for the auth blueprint."""

import hmac
from urllib.parse import urlparse


def check_admin_password(candidate, expected):
    """Compare a submitted passphrase with the configured one."""
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def is_safe_redirect(target):
    """Only allow redirects to paths on this site."""
    if not target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith("/")
