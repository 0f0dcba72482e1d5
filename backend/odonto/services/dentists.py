from __future__ import annotations

import logging
from typing import Any, Mapping

from odonto.models.dentist import Dentist
from odonto.services.gateway import DataGateway, GatewayError, QueryResult

logger = logging.getLogger("odonto.dentists")

TABLE = "dentists"


def list_dentists(gateway: DataGateway, *, page: int | None = 1) -> QueryResult:
    try:
        return gateway.query(TABLE, page=page)
    except GatewayError:
        logger.error("Error fetching dentists")
        raise


def get_dentist(gateway: DataGateway, dentist_id: str) -> Dentist:
    return gateway.get(TABLE, dentist_id)


def create_dentist(gateway: DataGateway, values: Mapping[str, Any]) -> Dentist:
    try:
        return gateway.insert(TABLE, values)
    except GatewayError:
        logger.error("Error creating dentist")
        raise


def update_dentist(gateway: DataGateway, dentist_id: str, patch: Mapping[str, Any]) -> Dentist:
    try:
        return gateway.update(TABLE, dentist_id, patch)
    except GatewayError:
        logger.error("Error updating dentist %s", dentist_id)
        raise


def delete_dentist(gateway: DataGateway, dentist_id: str) -> Dentist:
    try:
        return gateway.soft_delete(TABLE, dentist_id)
    except GatewayError:
        logger.error("Error deleting dentist %s", dentist_id)
        raise
