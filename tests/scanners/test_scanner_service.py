import pytest

from src.rfid_attendance.rfid_attendance.core.exceptions import NotFoundError, ValidationError


def test_save_and_list_scanners(container, admin):
    scanner_id = container.scanner_service.save_scanner(admin, device_id=" SCANNER-001 ", section_id="sec-a")

    (row,) = container.scanner_service.list_scanners(admin)
    assert row["scanner_id"] == scanner_id
    assert row["device_id"] == "SCANNER-001"
    assert row["section_name"] == "BSCS 1-A"


def test_list_shows_unassigned_for_missing_section(container, admin, repos):
    repos.scanners.create(device_id="ORPHAN", section_id="gone")

    (row,) = container.scanner_service.list_scanners(admin)
    assert row["section_name"] == "Unassigned"


@pytest.mark.parametrize(
    "device_id, section_id, message",
    [
        ("", "sec-a", "Please enter a Device ID and select a section."),
        ("SCANNER-002", "", "Please enter a Device ID and select a section."),
        ("SCANNER-002", "ghost", "Section not found"),
    ],
)
def test_save_scanner_validation(container, admin, device_id, section_id, message):
    with pytest.raises(ValidationError, match=message):
        container.scanner_service.save_scanner(admin, device_id=device_id, section_id=section_id)


def test_device_ids_are_unique(container, admin):
    first = container.scanner_service.save_scanner(admin, device_id="SCANNER-001", section_id="sec-a")
    container.scanner_service.save_scanner(admin, device_id="SCANNER-001", section_id="sec-a", scanner_id=first)

    with pytest.raises(ValidationError, match="already registered"):
        container.scanner_service.save_scanner(admin, device_id="SCANNER-001", section_id="sec-a")


def test_delete_scanner(container, admin):
    scanner_id = container.scanner_service.save_scanner(admin, device_id="SCANNER-001", section_id="sec-a")

    container.scanner_service.delete_scanner(admin, scanner_id)

    with pytest.raises(NotFoundError):
        container.scanner_service.delete_scanner(admin, scanner_id)
