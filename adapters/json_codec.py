"""Portable JSON export/import of a party, plus a plain-text summary.

Envelope layout (camelCase, compatible with earlier browser exports)::

    {
      "version": 1,
      "exportedAt": "2026-10-19T14:03:07.512Z",
      "snapshot": {"party": {...}, "notes": [...], "saveSlots": [...]}
    }
"""

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from config.exceptions import ImportFormatError
from models.enums import TALENT_LABELS
from models.records import PartySnapshot
from models.schema import from_document, to_document
from rules.character import MAX_SAVE_SLOTS

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


class JsonCodec:
    """Serialise snapshots to the export envelope and back."""

    def export_party(self, snapshot: PartySnapshot, exported_at: str) -> str:
        envelope = {
            "version": EXPORT_VERSION,
            "exportedAt": exported_at,
            "snapshot": to_document(snapshot),
        }
        return json.dumps(envelope, indent=2, ensure_ascii=False)

    def export_summary(self, snapshot: PartySnapshot, exported_at: str) -> str:
        """Human-readable digest. Never parsed back."""
        party = snapshot.party
        char = party.character
        lines = [
            f"=== {party.name} ===",
            f"Mode: {party.mode.value}",
            f"Status: {party.status.value}",
            f"Chapter: {party.current_chapter}",
            "",
            "--- Character ---",
            f"Name: {char.name}",
            f"Talent: {TALENT_LABELS.get(char.talent, char.talent.value)}",
            f"HP: {char.hp_current} / {char.hp_max}",
            f"Luck: {char.luck}",
            f"Dexterity: {char.dexterity}",
            "",
            f"Saves: {len(snapshot.save_slots)} / {MAX_SAVE_SLOTS}",
            f"Notes: {len(snapshot.notes)}",
            "",
            f"Exported at {exported_at}",
        ]
        return "\n".join(lines)

    def import_party(self, data: str | bytes) -> PartySnapshot:
        """Parse an export envelope.

        Raises:
            ImportFormatError: If ``data`` is not JSON or does not carry a
                valid ``snapshot.party``.
        """
        try:
            envelope = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ImportFormatError("Invalid JSON file", {"error": str(e)}) from e

        snapshot = envelope.get("snapshot") if isinstance(envelope, dict) else None
        if not isinstance(snapshot, dict) or not isinstance(snapshot.get("party"), dict):
            raise ImportFormatError("Unrecognised save format: missing snapshot.party")

        version = envelope.get("version")
        if version != EXPORT_VERSION:
            # TODO: add a migration step once a version 2 envelope exists
            logger.warning("Importing envelope version %r (current is %d)", version, EXPORT_VERSION)

        try:
            return from_document(PartySnapshot, snapshot)
        except PydanticValidationError as e:
            raise ImportFormatError(
                "Snapshot does not match the expected shape",
                {"errors": e.error_count()},
            ) from e
