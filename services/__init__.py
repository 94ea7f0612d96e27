"""
Services Package
================
Digest formatting and scheduling, device verification reading.
"""

from services.digest_formatter import format_digest, split_message
from services.verification_reader import VerificationReader, verification_reader
from services.digest_scheduler import DigestScheduler, DigestDelivery, parse_cron

__all__ = [
    "format_digest",
    "split_message",
    "VerificationReader",
    "verification_reader",
    "DigestScheduler",
    "DigestDelivery",
    "parse_cron",
]
