from __future__ import annotations

import logging

import httpx
from fastapi import Request

from odonto.core.settings import settings
from odonto.services.context import DEFAULT_IP

logger = logging.getLogger("odonto.client_ip")


def lookup_public_ip() -> str:
    if not settings.ip_lookup_enabled:
        return DEFAULT_IP
    try:
        response = httpx.get(settings.ip_lookup_url, timeout=settings.ip_lookup_timeout_seconds)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Public IP lookup failed: %s", exc)
        return DEFAULT_IP
    ip_address = payload.get("ip") if isinstance(payload, dict) else None
    if not isinstance(ip_address, str) or not ip_address.strip():
        return DEFAULT_IP
    return ip_address.strip()


def resolve_client_ip(request: Request | None) -> str:
    if request is not None:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",", 1)[0].strip()
            if first:
                return first
        if request.client and request.client.host:
            return request.client.host
    return lookup_public_ip()
