# src/seat_watch/connectors/matrix_client.py

from __future__ import annotations

import logging

from nio import AsyncClient, AsyncClientConfig, LoginResponse

logger = logging.getLogger(__name__)


async def create_matrix_client(settings) -> AsyncClient | None:
    """
    Create a logged-in Matrix AsyncClient (unencrypted rooms only).

    Credentials:
    - access token (+ optional device id) if configured: no login round-trip,
    - otherwise password login on every start.

    Nothing is written to disk.
    """
    homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
    user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
    password = (getattr(settings, "matrix_password", "") or "").strip()
    access_token = (getattr(settings, "matrix_access_token", "") or "").strip()
    device_id = (getattr(settings, "matrix_device_id", "") or "").strip()

    if not homeserver or not user_id:
        logger.error("Matrix is not configured: set SEATWATCH_MATRIX_HOMESERVER and SEATWATCH_MATRIX_USER_ID")
        return None

    config = AsyncClientConfig(encryption_enabled=False, store_sync_tokens=False)
    client = AsyncClient(homeserver, user_id, device_id=device_id, config=config)

    if access_token:
        client.access_token = access_token
        client.user_id = user_id
        if device_id:
            client.device_id = device_id
        logger.info("Matrix client using configured access token for %s", user_id)
        return client

    if not password:
        logger.error("Matrix needs SEATWATCH_MATRIX_ACCESS_TOKEN or SEATWATCH_MATRIX_PASSWORD.")
        await client.close()
        return None

    device_name = f"{getattr(settings, 'app_name', 'seat-watch')} (Python)"
    logger.info("Logging in to Matrix (device_name=%r)...", device_name)

    resp = await client.login(password=password, device_name=device_name)
    if not isinstance(resp, LoginResponse):
        logger.error("Matrix login failed: %r", resp)
        await client.close()
        return None

    logger.info("Matrix login ok (user=%s device=%s)", resp.user_id, resp.device_id)
    return client
