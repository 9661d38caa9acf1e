from __future__ import annotations

import copy
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from devex.errors import InvalidPayloadError


def _get(data: Any, key: str) -> Any:
    return data.get(key) if isinstance(data, Mapping) else None


def validate_payload(payload: Any) -> None:
    """Reject callback payloads lacking the fields survey operations rely on.

    Accepts either a raw dict (as decoded from Slack's JSON) or a
    ``CallbackPayload``. Required: a non-empty ``actions`` list,
    ``user.name``, ``team.domain`` and a ``state.values`` mapping (which may
    be empty). Individual actions and state entries are not inspected.
    """
    if isinstance(payload, CallbackPayload):
        _validate_model(payload)
        return

    if not payload or not isinstance(payload, Mapping):
        raise InvalidPayloadError()

    actions = payload.get("actions")
    if not actions or not isinstance(actions, list):
        raise InvalidPayloadError()

    if not _get(payload.get("user"), "name"):
        raise InvalidPayloadError()

    if not _get(payload.get("team"), "domain"):
        raise InvalidPayloadError()

    if not isinstance(_get(payload.get("state"), "values"), Mapping):
        raise InvalidPayloadError()


def _validate_model(payload: "CallbackPayload") -> None:
    if not payload.actions or not isinstance(payload.actions, list):
        raise InvalidPayloadError()
    if not payload.user_name or not payload.team_domain:
        raise InvalidPayloadError()
    if not isinstance(payload.state_values, Mapping):
        raise InvalidPayloadError()


@dataclass
class CallbackAction:
    """A single interaction inside a ``block_actions`` callback."""

    value: Optional[str] = None
    action_id: Optional[str] = None
    block_id: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CallbackAction":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            value=data.get("value"),
            action_id=data.get("action_id"),
            block_id=data.get("block_id"),
            type=data.get("type"),
        )


@dataclass
class CallbackPayload:
    """Validated Slack ``block_actions`` interaction payload.

    Only the fields the survey needs are modelled. ``state_values`` keeps the
    block order Slack sent.
    """

    user_name: str
    team_domain: str
    actions: List[CallbackAction]
    state_values: Dict[str, Dict[str, Any]]
    response_url: Optional[str] = None
    user_id: Optional[str] = None
    team_id: Optional[str] = None
    channel_id: Optional[str] = None
    type: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallbackPayload":
        """Validate and construct a CallbackPayload from a raw dict.

        Raises:
            InvalidPayloadError: required fields are missing.
        """
        validate_payload(data)

        user = data["user"]
        team = data["team"]
        channel = data.get("channel") if isinstance(data.get("channel"), Mapping) else {}

        return cls(
            user_name=user["name"],
            team_domain=team["domain"],
            actions=[CallbackAction.from_dict(a) for a in data["actions"]],
            state_values=copy.deepcopy(dict(data["state"]["values"])),
            response_url=data.get("response_url"),
            user_id=user.get("id"),
            team_id=team.get("id"),
            channel_id=channel.get("id"),
            type=data.get("type"),
            raw=copy.deepcopy(dict(data)),
        )

    @property
    def first_action_value(self) -> Optional[str]:
        return self.actions[0].value if self.actions else None

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload in Slack's wire shape."""
        if self.raw:
            return dict(self.raw)
        data: Dict[str, Any] = {
            "type": self.type,
            "user": {"id": self.user_id, "name": self.user_name},
            "team": {"id": self.team_id, "domain": self.team_domain},
            "actions": [asdict(a) for a in self.actions],
            "state": {"values": dict(self.state_values)},
            "response_url": self.response_url,
        }
        if self.channel_id is not None:
            data["channel"] = {"id": self.channel_id}
        return data


PayloadInput = Union[Dict[str, Any], CallbackPayload]


def as_callback_payload(payload: PayloadInput) -> CallbackPayload:
    """Validate ``payload`` and return it as a typed model."""
    if isinstance(payload, CallbackPayload):
        validate_payload(payload)
        return payload
    return CallbackPayload.from_dict(payload)


@dataclass(frozen=True)
class SurveyResponse:
    """Normalized result of a completed survey."""

    team: str
    choices: Tuple[str, ...]
    # Milliseconds since epoch
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"team": self.team, "choices": list(self.choices), "timestamp": self.timestamp}
