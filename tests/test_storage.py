"""Tests for serialization, file storage and backups."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from imob_control.exceptions import BackupFormatError, StorageError
from imob_control.ingest import normalize_amount
from imob_control.models import FinancialRecord, Property, PropertyStatus, PropertyType, RecordKind
from imob_control.storage import (
    AutoBackup,
    JsonFileStorage,
    backup_filename,
    create_backup,
    dump_backup,
    parse_backup,
    read_backup,
    write_backup,
)
from imob_control.storage.serialization import (
    properties_to_document,
    property_from_dict,
    property_to_dict,
    record_to_dict,
    serialize_value,
)

NOW = datetime(2025, 11, 2, 12, tzinfo=timezone.utc)


class FakeTimer:
    """Stand-in for threading.Timer that runs only when told to."""

    created: list["FakeTimer"] = []

    def __init__(self, interval: float, function, args=()) -> None:
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function(*self.args)


@pytest.fixture(autouse=True)
def reset_timers() -> None:
    FakeTimer.created = []


class TestSerialization:
    """Tests for the document form of models."""

    def test_serialize_decimal(self) -> None:
        assert serialize_value(Decimal("1200")) == 1200
        assert isinstance(serialize_value(Decimal("1200.00")), int)
        assert serialize_value(Decimal("99.5")) == 99.5

    def test_serialize_enum_and_nested(self) -> None:
        value = {"kind": RecordKind.EXPENSE, "items": [Decimal("1")]}
        assert serialize_value(value) == {"kind": "expense", "items": [1]}

    def test_record_uses_wire_names(self, stay_record: FinancialRecord) -> None:
        data = record_to_dict(stay_record)
        assert data == {
            "date": "02/11/2025",
            "amount": 1200,
            "description": "Diária Airbnb",
            "type": "revenue",
            "checkIn": "02/11/2025",
            "checkOut": "06/11/2025",
        }

    def test_record_omits_missing_stay_dates(self) -> None:
        data = record_to_dict(FinancialRecord("01/11/2025", Decimal("5"), "x", RecordKind.EXPENSE))
        assert "checkIn" not in data
        assert "checkOut" not in data

    def test_property_round_trip(self, sample_property: Property) -> None:
        data = json.loads(json.dumps(property_to_dict(sample_property)))
        assert data["consumerUnit"] == "55443322"
        assert data["type"] == "Apartamento"
        assert data["status"] == "Alugado"
        assert property_from_dict(data) == sample_property

    def test_missing_fields_take_defaults(self) -> None:
        prop = property_from_dict({"id": "x"})

        assert prop.title == "Novo Imóvel"
        assert prop.type == PropertyType.APARTMENT
        assert prop.status == PropertyStatus.AVAILABLE
        assert prop.price == Decimal("0")
        assert prop.rental_history == []

    def test_enum_by_member_name(self) -> None:
        prop = property_from_dict({"id": "x", "type": "house", "status": "SOLD"})
        assert prop.type == PropertyType.HOUSE
        assert prop.status == PropertyStatus.SOLD

    def test_unknown_enum_falls_back(self) -> None:
        prop = property_from_dict({"id": "x", "type": "Castelo"})
        assert prop.type == PropertyType.APARTMENT

    def test_legacy_records_without_kind(self) -> None:
        prop = property_from_dict(
            {"id": "x", "rentalHistory": [{"date": "01/01/2024", "amount": 300, "description": "old"}]}
        )
        assert prop.rental_history[0].kind == RecordKind.REVENUE

    def test_fractional_amount_survives_json(self) -> None:
        text = json.dumps(serialize_value(Decimal("1234.56")))
        assert normalize_amount(json.loads(text)) == Decimal("1234.56")

    def test_null_amount_record_kept(self) -> None:
        prop = property_from_dict(
            {"id": "x", "rentalHistory": [{"date": "01/11/2025", "amount": None, "description": "?"}]}
        )

        (record,) = prop.rental_history
        assert record.amount is None
        assert record_to_dict(record)["amount"] is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(-5, Decimal("-5")), ("1500.50", Decimal("1500.50")), ("caro", Decimal("0")), (None, Decimal("0"))],
    )
    def test_price_coercion(self, raw: object, expected: Decimal) -> None:
        assert property_from_dict({"id": "x", "price": raw}).price == expected

    def test_document_wrapper(self, sample_property: Property) -> None:
        document = properties_to_document([sample_property])
        assert list(document) == ["properties"]
        assert document["properties"][0]["id"] == "prop-001"


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonFileStorage(tmp_path).load() == []

    def test_save_and_load(self, tmp_path: Path, sample_property: Property, second_property: Property) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.save([sample_property, second_property])

        assert storage.file_path == tmp_path / "imobcontrol_data.json"
        assert storage.load() == [sample_property, second_property]
        assert not (tmp_path / "imobcontrol_data.json.tmp").exists()

    def test_namespaced_file(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path, namespace="admin")
        assert storage.file_path.name == "imobcontrol_data_admin.json"

    def test_pretty_output(self, tmp_path: Path, sample_property: Property) -> None:
        storage = JsonFileStorage(tmp_path, pretty=True)
        storage.save([sample_property])
        text = storage.file_path.read_text(encoding="utf-8")
        assert text.startswith('{\n  "properties"')
        assert "Diária" in text

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.file_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            storage.load()

    def test_document_without_properties_raises(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.file_path.write_text('{"items": []}', encoding="utf-8")
        with pytest.raises(StorageError, match="properties"):
            storage.load()

    def test_creates_data_dir(self, tmp_path: Path) -> None:
        JsonFileStorage(tmp_path / "nested" / "data")
        assert (tmp_path / "nested" / "data").is_dir()


class TestBackup:
    """Tests for backup export and restore."""

    def test_create_backup(self, sample_property: Property) -> None:
        backup = create_backup([sample_property], NOW)

        assert backup["backupDate"] == "2025-11-02T12:00:00.000Z"
        assert backup["version"] == "1.0"
        assert backup["properties"][0]["id"] == "prop-001"

    def test_backup_filename(self) -> None:
        assert backup_filename(NOW) == "imobcontrol_backup_2025-11-02.json"

    def test_dump_is_indented(self, sample_property: Property) -> None:
        assert '\n  "properties": [' in dump_backup([sample_property], NOW)

    def test_write_and_read(self, tmp_path: Path, sample_property: Property) -> None:
        path = write_backup([sample_property], tmp_path / "backups", NOW)

        assert path.name == "imobcontrol_backup_2025-11-02.json"
        assert read_backup(path) == [sample_property]

    def test_parse_ignores_version(self) -> None:
        text = json.dumps({"properties": [{"id": "a"}], "version": "9.9"})
        assert [p.id for p in parse_backup(text)] == ["a"]

    def test_parse_empty_portfolio(self) -> None:
        assert parse_backup('{"properties": []}') == []

    @pytest.mark.parametrize("text", ["not json", "[]", '{"properties": "nope"}', "{}"])
    def test_parse_rejects_invalid(self, text: str) -> None:
        with pytest.raises(BackupFormatError):
            parse_backup(text)

    def test_format_error_is_storage_error(self) -> None:
        with pytest.raises(StorageError):
            parse_backup("{}")

    def test_read_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StorageError):
            read_backup(tmp_path / "missing.json")


class TestAutoBackup:
    """Tests for the debounced automatic backup."""

    def test_schedules_timer(self, tmp_path: Path, sample_property: Property) -> None:
        auto = AutoBackup(tmp_path, delay_seconds=5.0, timer_factory=FakeTimer)
        auto.notify_change([sample_property])

        timer = FakeTimer.created[0]
        assert timer.interval == 5.0
        assert timer.started
        assert timer.daemon
        assert auto.pending

    def test_new_change_resets_timer(self, tmp_path: Path, sample_property: Property) -> None:
        auto = AutoBackup(tmp_path, timer_factory=FakeTimer)
        auto.notify_change([sample_property])
        auto.notify_change([sample_property])

        first, second = FakeTimer.created
        assert first.cancelled
        assert not second.cancelled

    def test_fire_writes_backup(self, tmp_path: Path, sample_property: Property) -> None:
        auto = AutoBackup(tmp_path, timer_factory=FakeTimer)
        auto.notify_change([sample_property])
        FakeTimer.created[0].fire()

        assert not auto.pending
        assert auto.last_backup is not None
        assert read_backup(auto.last_backup) == [sample_property]

    def test_empty_portfolio_not_backed_up(self, tmp_path: Path) -> None:
        auto = AutoBackup(tmp_path, timer_factory=FakeTimer)
        auto.notify_change([])
        assert FakeTimer.created == []
        assert not auto.pending

    def test_disabled(self, tmp_path: Path, sample_property: Property) -> None:
        auto = AutoBackup(tmp_path, enabled=False, timer_factory=FakeTimer)
        auto.notify_change([sample_property])
        assert FakeTimer.created == []

    def test_cancel(self, tmp_path: Path, sample_property: Property) -> None:
        auto = AutoBackup(tmp_path, timer_factory=FakeTimer)
        auto.notify_change([sample_property])
        auto.cancel()

        assert FakeTimer.created[0].cancelled
        assert not auto.pending
