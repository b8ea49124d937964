"""Certificate issuing.

Identifiers are 16 upper-case hex characters from a cryptographic random
source behind a fixed prefix, so they cannot be guessed by enumerating
students, courses or timestamps.
"""

from __future__ import annotations

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.config import get_settings
from peerlearn.db.factories import new_certificate
from peerlearn.db.models import Certificate

logger = logging.getLogger(__name__)

CERTIFICATE_TOKEN_BYTES = 8


def generate_certificate_id(prefix: str | None = None) -> str:
    """Generate a random certificate identifier such as ``CERT-9F2C01AB77D4E3B0``."""
    if prefix is None:
        prefix = get_settings().certificate_prefix
    return prefix + secrets.token_hex(CERTIFICATE_TOKEN_BYTES).upper()


async def generate_unique_certificate_id(db: AsyncSession) -> str:
    """Generate a certificate id that doesn't already exist in the database."""
    for _ in range(10):
        candidate = generate_certificate_id()
        existing = await db.execute(
            select(Certificate.id).where(Certificate.certificate_id == candidate)
        )
        if existing.scalar_one_or_none() is None:
            return candidate
    raise RuntimeError("Failed to generate unique certificate id after 10 attempts")


async def issue_certificate(
    db: AsyncSession,
    student_id: str,
    course_id: str,
    mentor_id: str,
) -> Certificate:
    """Insert one certificate row. Does not commit."""
    certificate = new_certificate(
        student_id=student_id,
        course_id=course_id,
        mentor_id=mentor_id,
        certificate_id=await generate_unique_certificate_id(db),
    )
    db.add(certificate)
    await db.flush()
    logger.info("Certificate %s issued to %s for course %s", certificate.certificate_id, student_id, course_id)
    return certificate
