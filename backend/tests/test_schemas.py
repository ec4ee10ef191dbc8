import pytest
from pydantic import ValidationError

from eggs_access.auth.catalog import Role
from eggs_access.schemas.identity import ApplicationUser, DirectoryRecord, Identity
from eggs_access.schemas.reset import ResetPreview, format_data_label


def test_directory_record_coerces_sqlite_row() -> None:
    record = DirectoryRecord.model_validate(
        {"id": 4, "mocha_user_id": "mocha-9", "email": "a@x", "name": "A", "role": "staff", "is_active": 0}
    )

    assert record.id == "4"
    assert record.identity_id == "mocha-9"
    assert record.is_active is False
    assert record.binds(Identity(id="mocha-9", email="a@x"))
    assert not record.binds(Identity(id="mocha-1", email="a@x"))


def test_unbound_record_binds_nobody() -> None:
    record = DirectoryRecord(id="5", email="a@x", name="A", role="staff")
    assert not record.binds(Identity(id="mocha-1", email="a@x"))


def test_application_user_parses_role() -> None:
    user = ApplicationUser(id="1", email="a@x", name="A", role="manager")
    assert user.role is Role.MANAGER
    assert user.is_active is True

    with pytest.raises(ValidationError):
        ApplicationUser(id="1", email="a@x", name="A", role="owner")


def test_identity_requires_id() -> None:
    with pytest.raises(ValidationError):
        Identity(id="", email="a@x")


def test_preview_totals_and_labels() -> None:
    preview = ResetPreview(
        transactional_data={"sales": 2, "petty_cash": 1},
        master_data={"customers": 4},
        will_be_reset={"bank_account_balances": 1},
    )

    assert preview.transactional_total == 3
    assert preview.master_total == 4
    assert preview.labelled_counts() == [
        ("Data Transaksional", "Penjualan", 2),
        ("Data Transaksional", "Kas Kecil", 1),
        ("Data Master", "Pelanggan", 4),
        ("Akan Direset", "Saldo Rekening Bank", 1),
    ]
    assert format_data_label("audit_log") == "audit_log"
