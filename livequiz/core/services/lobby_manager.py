"""Service for managing participants joining a hosted quiz."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from livequiz.core.models import QuizParticipant, QuizSettings


class LobbyManager:
    """Manages the waiting room, enforcing the quiz's join settings."""

    def __init__(self) -> None:
        self._lobby_open: bool = False
        self._participants: dict[str, QuizParticipant] = {}
        self._settings = QuizSettings()

    def open_lobby(self, settings: QuizSettings) -> None:
        self._settings = settings
        self._lobby_open = True
        self._participants.clear()

    def close_lobby(self) -> None:
        self._lobby_open = False
        self._participants.clear()

    def is_open(self) -> bool:
        return self._lobby_open

    def register_participant(self, display_name: str) -> QuizParticipant:
        """Register a participant.

        Names are compared case-insensitively. Rejoining under a taken name is
        refused when names must be unique, otherwise the existing entry is returned.
        """
        if not self.is_open():
            raise RuntimeError("Lobby is not currently open.")

        name = display_name.strip()
        if not name:
            raise ValueError("Display name must not be empty.")

        key = name.casefold()
        existing = self._participants.get(key)
        if existing is not None:
            if self._settings.guest_name_unique:
                raise ValueError(f"Display name '{name}' is already taken.")
            return existing

        if len(self._participants) >= self._settings.max_participants:
            raise RuntimeError("Quiz is full.")

        entry = QuizParticipant(
            participant_id=uuid4().hex,
            display_name=name,
            joined_at=datetime.now(timezone.utc),
        )
        self._participants[key] = entry
        return entry

    def get_participants(self) -> list[QuizParticipant]:
        return sorted(self._participants.values(), key=lambda p: p.joined_at)

    def finalize_participants(self) -> list[QuizParticipant]:
        """Close the lobby and return the final list of participants."""
        snapshot = self.get_participants()
        self._participants.clear()
        self._lobby_open = False
        return snapshot
