from __future__ import annotations

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

DEV_ENVS = {"dev", "local"}


def _is_dev(env: str) -> bool:
    return env.lower() in DEV_ENVS


def verify_post_signature(body: bytes, signature_header: str | None, secret: str | None, env: str) -> bool:
    """
    Check the gateway's X-Gateway-Signature header: "sha256=<hex digest>" of the raw body.
    Unsigned posts are only accepted in dev/local.
    """
    if not signature_header:
        if _is_dev(env):
            logger.warning("Unsigned gateway post accepted in dev mode")
            return True
        return False

    if not secret:
        logger.error("GATEWAY_WEBHOOK_SECRET missing; cannot verify gateway signature")
        return False

    algo, sep, digest = signature_header.partition("=")
    if not sep or algo.strip().lower() != "sha256":
        logger.warning("Unsupported gateway signature format", extra={"reason": algo})
        return False

    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected, digest.strip()):
        logger.warning("Gateway signature mismatch")
        return False
    return True


def verify_jobs_token(token_header: str | None, expected: str | None, env: str) -> bool:
    """Jobs are open in dev/local when no token is configured, closed otherwise."""
    if not expected:
        return _is_dev(env)
    if not token_header:
        return False
    return hmac.compare_digest(token_header, expected)
