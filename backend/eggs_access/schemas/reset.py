from datetime import datetime

from pydantic import BaseModel, Field


TABLE_LABELS: dict[str, str] = {
    "sales": "Penjualan",
    "sale_items": "Item Penjualan",
    "purchases": "Pembelian",
    "purchase_items": "Item Pembelian",
    "production_batches": "Batch Produksi",
    "production_inputs": "Input Produksi",
    "production_outputs": "Output Produksi",
    "financial_transactions": "Transaksi Keuangan",
    "credit_sales": "Penjualan Kredit",
    "credit_payments": "Pembayaran Kredit",
    "petty_cash": "Kas Kecil",
    "bank_transactions": "Transaksi Bank",
    "products": "Produk",
    "raw_materials": "Bahan Baku",
    "customers": "Pelanggan",
    "suppliers": "Supplier",
    "employees": "Karyawan",
    "product_recipes": "Resep Produk",
    "price_tiers": "Tingkat Harga",
    "bank_account_balances": "Saldo Rekening Bank",
}


def format_data_label(key: str) -> str:
    return TABLE_LABELS.get(key, key)


class ResetPreview(BaseModel):
    """Read-only snapshot of what a data reset would touch."""

    transactional_data: dict[str, int] = Field(default_factory=dict)
    master_data: dict[str, int] = Field(default_factory=dict)
    will_be_reset: dict[str, int] = Field(default_factory=dict)
    will_be_preserved: dict[str, str] = Field(default_factory=dict)

    @property
    def transactional_total(self) -> int:
        return sum(self.transactional_data.values())

    @property
    def master_total(self) -> int:
        return sum(self.master_data.values())

    def labelled_counts(self) -> list[tuple[str, str, int]]:
        """(section, label, count) rows in display order."""
        rows: list[tuple[str, str, int]] = []
        for section, counts in (
            ("Data Transaksional", self.transactional_data),
            ("Data Master", self.master_data),
            ("Akan Direset", self.will_be_reset),
        ):
            rows.extend((section, format_data_label(key), count) for key, count in counts.items())
        return rows


class ResetPreviewResponse(BaseModel):
    preview: ResetPreview
    total_records_to_delete: int = Field(..., ge=0)
    confirmation_required: str | None = None
    warning: str | None = None


class ResetRequest(BaseModel):
    confirmation_code: str = Field(..., min_length=1)
    confirmation_timestamp: datetime


class ResetResult(BaseModel):
    total_deleted: int = Field(..., ge=0)
    reset_timestamp: datetime
    deletion_log: list[str] = Field(default_factory=list)
    message: str | None = None
