"""Helpers shared by the use cases."""

import logging
import uuid

from config.exceptions import PartyNotActiveError, PartyNotFoundError
from models.enums import PartyStatus
from models.party import Party

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def load_party(parties, party_id: str) -> Party:
    """Fetch a party or raise ``PartyNotFoundError``."""
    party = parties.find_by_id(party_id)
    if party is None:
        logger.warning("Party %s not found", party_id)
        raise PartyNotFoundError(party_id)
    return party


def require_active(party: Party) -> None:
    """Finished and dead parties accept no further play actions."""
    if party.status != PartyStatus.ACTIVE:
        logger.warning("Rejected play action on %s party %s", party.status.value, party.id)
        raise PartyNotActiveError(party.id, party.status.value)


def preview(text: str, limit: int = 40) -> str:
    """First ``limit`` characters, with an ellipsis when cut."""
    return text[:limit] + ("…" if len(text) > limit else "")
