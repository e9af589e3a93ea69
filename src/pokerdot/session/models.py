"""
Pydantic model for cached session records.

On disk a record is a flat JSON object: the three key fields under the names
the web client used (``gameId``, ``playerKey``, ``startTime``) next to any
application fields, which the cache carries around untouched as ``payload``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STORED_KEYS = ("gameId", "playerKey", "startTime")


class SessionRecord(BaseModel):
    """A previously joined game, keyed by (session_id, participant_key)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    session_id: str = Field(alias="gameId")
    participant_key: str = Field(alias="playerKey")
    saved_at: int = Field(default=0, alias="startTime")
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        return (self.session_id, self.participant_key)

    def matches(self, session_id: str, participant_key: str) -> bool:
        return self.session_id == session_id and self.participant_key == participant_key

    @classmethod
    def from_stored(cls, data: Any) -> "SessionRecord":
        """Build a record from one element of the persisted array."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        payload = {k: v for k, v in data.items() if k not in STORED_KEYS}
        return cls.model_validate(
            {
                "gameId": data.get("gameId"),
                "playerKey": data.get("playerKey"),
                "startTime": data.get("startTime", 0),
                "payload": payload,
            }
        )

    def to_stored(self) -> dict[str, Any]:
        """Flatten into the persisted layout."""
        return {
            **self.payload,
            "gameId": self.session_id,
            "playerKey": self.participant_key,
            "startTime": self.saved_at,
        }
