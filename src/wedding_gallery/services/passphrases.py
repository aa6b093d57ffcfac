"""Passphrase verification against bcrypt hashes."""

import asyncio
import functools
import logging
import secrets
from dataclasses import dataclass

import bcrypt

from wedding_gallery.services.sections import SectionRegistry

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


def hash_passphrase(passphrase: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a bcrypt hash suitable for GALLERY_SECTIONS."""
    return bcrypt.hashpw(passphrase.encode("utf-8"), bcrypt.gensalt(rounds)).decode(
        "utf-8"
    )


def check_passphrase(passphrase: str, hashed: str) -> bool:
    """Compare a plaintext passphrase with a stored hash."""
    try:
        return bcrypt.checkpw(passphrase.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or a passphrase over bcrypt's 72-byte limit.
        logger.error("Passphrase could not be checked against the stored hash")
        return False


@functools.cache
def _unknown_section_hash() -> str:
    return hash_passphrase(secrets.token_urlsafe(16))


@dataclass
class PassphraseVerifier:
    """Checks submitted passphrases for a section."""

    registry: SectionRegistry

    async def verify(self, section_id: str, passphrase: str) -> bool:
        """Return true when the passphrase matches the section's hash."""
        section = self.registry.get_by_id(section_id)
        if section is None:
            logger.warning(
                "Passphrase verification for unknown section",
                extra={"section_id": section_id},
            )
            # Same bcrypt cost as a real section.
            await asyncio.to_thread(
                check_passphrase, passphrase, _unknown_section_hash()
            )
            return False
        is_valid = await asyncio.to_thread(
            check_passphrase, passphrase, section.passphrase_hash
        )
        if is_valid:
            logger.info("Passphrase verified", extra={"section_id": section_id})
        else:
            logger.warning("Invalid passphrase", extra={"section_id": section_id})
        return is_valid
