from __future__ import annotations
import asyncio
import logging

from ..services.otp_ledger import OtpLedger

log = logging.getLogger("worker.challenge_sweeper")

async def run_once(ledger: OtpLedger) -> int:
    removed = await ledger.sweep_expired()
    if removed:
        log.info(f"swept {removed} expired challenges")
    return removed

async def run_forever(ledger: OtpLedger, interval_sec: int):
    while True:
        try:
            await run_once(ledger)
        except Exception as e:
            log.exception("challenge_sweeper error: %s", e)
        await asyncio.sleep(interval_sec)
