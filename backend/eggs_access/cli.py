"""
Console driver for the data reset workflow.

Walks a super admin through preview, typed-phrase confirmation and the final
irreversible delete against the configured API.

Usage:
    mreggs-reset [--log-level LEVEL]

Exit codes: 0 reset completed, 1 denied or failed, 2 cancelled.
"""
from __future__ import annotations

import argparse
import asyncio
from collections.abc import Callable, Sequence

from .clients import HttpIdentityProvider, HttpResetClient, HttpUserDirectory, build_requester
from .config import get_settings
from .domain.ports.reset import ResetPort
from .schemas.reset import format_data_label
from .services.permission_session import PermissionSession
from .services.reset_workflow import CONFIRMATION_PHRASE, ResetWorkflow
from .utils.log_config import configure_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 2

Ask = Callable[[str], str]
Say = Callable[[str], None]


def _yes(answer: str) -> bool:
    return answer.strip().lower() in {"y", "ya", "yes"}


def _show_preview(workflow: ResetWorkflow, say: Say) -> None:
    preview = workflow.preview
    if preview is None:
        return
    current_section = None
    for section, label, count in preview.labelled_counts():
        if section != current_section:
            say(f"\n{section}")
            current_section = section
        say(f"  {label:<24} {count:>8,}")
    if preview.will_be_preserved:
        say("\nAkan Dipertahankan")
        for key, description in preview.will_be_preserved.items():
            say(f"  {format_data_label(key)}: {description}")
    say(f"\nTotal data yang akan dihapus: {workflow.total_to_delete:,} records")


async def run_reset(
    session: PermissionSession,
    reset_port: ResetPort,
    *,
    ask: Ask = input,
    say: Say = print,
) -> int:
    context = await session.load()
    if not context.is_authenticated:
        say("Anda perlu login untuk mengakses halaman ini")
        return EXIT_FAILED

    workflow = ResetWorkflow(context, reset_port)
    if workflow.locked:
        say(f"Akses Terbatas: {workflow.locked_message}")
        return EXIT_FAILED

    say("PERINGATAN: Tindakan ini TIDAK DAPAT DIBATALKAN.")
    say("Semua data penjualan, pembelian, produksi, keuangan dan data master akan dihapus.")
    say("Akun user dan pengaturan sistem akan tetap terjaga.")

    await workflow.load_preview()
    if workflow.error_message:
        say(f"Error: {workflow.error_message}")
        return EXIT_FAILED
    _show_preview(workflow, say)

    if not _yes(ask("Lanjut reset? [y/N] ")):
        workflow.back()
        return EXIT_CANCELLED

    workflow.proceed()
    workflow.enter_phrase(ask(f'Ketik "{CONFIRMATION_PHRASE}" untuk melanjutkan: '))
    if not workflow.confirm_phrase():
        say(workflow.notice or "")
        workflow.cancel()
        return EXIT_CANCELLED

    prompt = "Jalankan reset sekarang? [y/N] "
    while True:
        if not _yes(ask(prompt)):
            failed = workflow.error_message is not None
            workflow.cancel()
            return EXIT_FAILED if failed else EXIT_CANCELLED
        result = await workflow.execute()
        if result is not None:
            break
        say(f"Reset gagal: {workflow.error_message}")
        prompt = "Coba jalankan lagi? [y/N] "

    say("\nReset Data Berhasil!")
    say(f"Total data dihapus: {result.total_deleted:,} records")
    say(f"Waktu reset: {result.reset_timestamp.isoformat()}")
    for line in result.deletion_log:
        say(f"  {line}")
    workflow.dismiss()
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mreggs-reset",
        description="Hapus semua data bisnis (hanya Super Admin).",
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    requester = build_requester(settings)
    session = PermissionSession(HttpIdentityProvider(requester), HttpUserDirectory(requester))
    return asyncio.run(run_reset(session, HttpResetClient(requester)))


if __name__ == "__main__":
    raise SystemExit(main())
