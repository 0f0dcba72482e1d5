from decimal import Decimal

import pytest

from odonto.models.odontogram import ConditionStatus, ConditionType, OdontogramType, Surface
from odonto.services import odontograms as odontogram_service
from odonto.services.gateway import GatewayError, NotFoundError
from odonto.services.odontograms import InvalidToothError, ReadOnlyVersionError


@pytest.fixture
def patient(gateway):
    return gateway.insert("patients", {"name": "Ana Ruiz"})


def _conditions(gateway, odontogram_id):
    return odontogram_service.list_conditions(gateway, odontogram_id)


def test_caries_then_healthy_removes_row(gateway, patient):
    version = odontogram_service.create_version(gateway, patient.id, "Inicial")

    result = odontogram_service.save_condition(
        gateway, version.id, 36, Surface.occlusal, ConditionType.caries
    )
    assert result.action == "created"
    assert result.condition.status == ConditionStatus.planned
    assert len(_conditions(gateway, version.id)) == 1

    result = odontogram_service.save_condition(
        gateway, version.id, 36, Surface.occlusal, ConditionType.healthy
    )
    assert result.action == "deleted"
    assert _conditions(gateway, version.id) == []
    assert gateway.maybe_get(
        "tooth_conditions",
        {"odontogram_id": version.id, "tooth_number": 36, "surface": Surface.occlusal},
    ) is None


def test_healthy_on_empty_surface_is_noop(gateway, patient):
    version = odontogram_service.create_version(gateway, patient.id, "Inicial")
    result = odontogram_service.save_condition(
        gateway, version.id, 21, Surface.mesial, ConditionType.healthy
    )
    assert result.action == "unchanged"
    assert _conditions(gateway, version.id) == []


def test_second_save_updates_same_surface(gateway, patient):
    version = odontogram_service.create_version(gateway, patient.id, "Inicial")
    first = odontogram_service.save_condition(
        gateway, version.id, 36, Surface.occlusal, ConditionType.caries
    )
    second = odontogram_service.save_condition(
        gateway,
        version.id,
        36,
        Surface.occlusal,
        ConditionType.restoration,
        status=ConditionStatus.completed,
        cost=Decimal("45.00"),
    )
    assert second.action == "updated"
    assert second.condition.id == first.condition.id
    rows = _conditions(gateway, version.id)
    assert len(rows) == 1
    assert rows[0].condition_type == ConditionType.restoration
    assert rows[0].status == ConditionStatus.completed


def test_new_version_copies_findings_as_existing(gateway, patient):
    v1 = odontogram_service.create_version(gateway, patient.id, "Inicial")
    assert v1.type == OdontogramType.initial
    odontogram_service.save_condition(
        gateway,
        v1.id,
        11,
        Surface.vestibular,
        ConditionType.caries,
        notes="mancha",
        cost=Decimal("30.00"),
    )

    v2 = odontogram_service.create_version(gateway, patient.id, "Control")
    assert v2.type == OdontogramType.evolution
    copied = _conditions(gateway, v2.id)
    assert len(copied) == 1
    assert copied[0].tooth_number == 11
    assert copied[0].status == ConditionStatus.existing
    assert copied[0].notes == "mancha"
    assert copied[0].cost is None

    odontogram_service.save_condition(
        gateway, v2.id, 11, Surface.vestibular, ConditionType.restoration
    )
    original = _conditions(gateway, v1.id)
    assert len(original) == 1
    assert original[0].condition_type == ConditionType.caries
    assert original[0].status == ConditionStatus.planned
    assert _conditions(gateway, v2.id)[0].condition_type == ConditionType.restoration


def test_older_version_is_read_only(gateway, patient):
    v1 = odontogram_service.create_version(gateway, patient.id, "Inicial")
    v2 = odontogram_service.create_version(gateway, patient.id, "Control")

    assert not odontogram_service.is_latest(gateway, v1)
    assert odontogram_service.is_latest(gateway, v2)
    with pytest.raises(ReadOnlyVersionError):
        odontogram_service.save_condition(
            gateway, v1.id, 16, Surface.occlusal, ConditionType.caries
        )


def test_versions_listed_newest_first(gateway, patient):
    v1 = odontogram_service.create_version(gateway, patient.id, "Inicial")
    v2 = odontogram_service.create_version(gateway, patient.id, "Control")
    versions = odontogram_service.list_versions(gateway, patient.id)
    assert [v.id for v in versions] == [v2.id, v1.id]
    assert odontogram_service.current_version(gateway, patient.id).id == v2.id
    assert odontogram_service.current_version(gateway, patient.id, v1.id).id == v1.id


def test_current_version_rejects_other_patient(gateway, patient):
    other = gateway.insert("patients", {"name": "Luis Mora"})
    version = odontogram_service.create_version(gateway, other.id, "Inicial")
    with pytest.raises(NotFoundError):
        odontogram_service.current_version(gateway, patient.id, version.id)


def test_invalid_tooth_numbers_rejected(gateway, patient):
    version = odontogram_service.create_version(gateway, patient.id, "Inicial")
    with pytest.raises(InvalidToothError):
        odontogram_service.save_condition(
            gateway, version.id, 19, Surface.occlusal, ConditionType.caries
        )
    with pytest.raises(InvalidToothError):
        odontogram_service.save_condition(
            gateway, version.id, 14, Surface.whole, ConditionType.caries, range_end_tooth=11
        )
    result = odontogram_service.save_condition(
        gateway, version.id, 14, Surface.whole, ConditionType.bridge, range_end_tooth=11
    )
    assert result.condition.range_end_tooth == 11


def test_failed_copy_leaves_no_version(gateway, patient, monkeypatch):
    v1 = odontogram_service.create_version(gateway, patient.id, "Inicial")
    odontogram_service.save_condition(gateway, v1.id, 11, Surface.whole, ConditionType.crown)

    original_insert = gateway.insert

    def failing_insert(table, values):
        if table == "tooth_conditions":
            raise GatewayError("insert on tooth_conditions failed", table=table, operation="insert")
        return original_insert(table, values)

    monkeypatch.setattr(gateway, "insert", failing_insert)
    with pytest.raises(GatewayError):
        odontogram_service.create_version(gateway, patient.id, "Control")
    monkeypatch.undo()

    versions = odontogram_service.list_versions(gateway, patient.id)
    assert [v.id for v in versions] == [v1.id]


def test_summary_counts(gateway, patient):
    version = odontogram_service.create_version(gateway, patient.id, "Inicial")
    odontogram_service.save_condition(gateway, version.id, 11, Surface.whole, ConditionType.crown)
    odontogram_service.save_condition(
        gateway,
        version.id,
        36,
        Surface.occlusal,
        ConditionType.restoration,
        status=ConditionStatus.completed,
    )
    odontogram_service.save_condition(
        gateway,
        version.id,
        46,
        Surface.whole,
        ConditionType.missing,
        status=ConditionStatus.existing,
    )
    summary = odontogram_service.summarize(_conditions(gateway, version.id))
    assert summary == {"total": 3, "completed": 1, "pending": 1}
