from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from odonto.models.treatment import TreatmentCatalogItem, TreatmentCost
from odonto.services.gateway import DataGateway

logger = logging.getLogger("odonto.catalog")

DEFAULT_CATALOG: tuple[tuple[str, str], ...] = (
    ("Consulta inicial", "generales"),
    ("Limpieza dental", "generales"),
    ("Profilaxis general", "generales"),
    ("Revisión general", "generales"),
    ("Obturación simple", "individuales"),
    ("Obturación compuesta", "individuales"),
    ("Empaste", "individuales"),
    ("Endodoncia", "individuales"),
    ("Extracción", "individuales"),
    ("Corona", "individuales"),
    ("Implante", "individuales"),
    ("Blanqueamiento", "generales"),
    ("Cirugía oral", "individuales"),
    ("Ortodoncia - Consulta", "generales"),
    ("Ortodoncia - Revisión", "generales"),
    ("Sellantes", "pediatrico"),
    ("Aplicación de flúor", "pediatrico"),
)


def ensure_default_catalog(db: Session) -> int:
    existing = set(db.scalars(select(TreatmentCatalogItem.name)))
    added = 0
    for name, category in DEFAULT_CATALOG:
        if name in existing:
            continue
        db.add(TreatmentCatalogItem(name=name, category=category))
        added += 1
    if added:
        db.commit()
    return added


def list_catalog(gateway: DataGateway) -> list[TreatmentCatalogItem]:
    return gateway.query("treatments_catalog", order_by=("name",)).rows


def list_costs(gateway: DataGateway) -> list[TreatmentCost]:
    return gateway.query("treatment_costs", order_by=("created_date",)).rows


def get_cost_for_treatment(gateway: DataGateway, treatment_name: str) -> Decimal:
    """Clinic base cost for a catalog procedure, 0 when unknown or unpriced."""
    item = gateway.maybe_get("treatments_catalog", {"name": treatment_name})
    if item is None:
        return Decimal("0")
    cost = gateway.maybe_get("treatment_costs", {"treatment_catalog_id": item.id})
    return cost.base_cost if cost else Decimal("0")


def update_cost(gateway: DataGateway, catalog_id: str, base_cost: Decimal) -> TreatmentCost:
    gateway.get("treatments_catalog", catalog_id)
    existing = gateway.maybe_get("treatment_costs", {"treatment_catalog_id": catalog_id})
    if existing is not None:
        return gateway.update("treatment_costs", existing.id, {"base_cost": base_cost})
    return gateway.insert(
        "treatment_costs", {"treatment_catalog_id": catalog_id, "base_cost": base_cost}
    )
