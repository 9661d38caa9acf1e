"""Outbound Slack message models.

Survey messages are sequences of blocks drawn from a closed set of variants,
each tagged with its Slack ``type``. ``block_to_dict`` is the single place
that turns a block into Slack's JSON shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from config.constants import (
    EPHEMERAL,
    FINALIZE,
    FINISH_ACTION_ID,
    MRKDWN,
    PLAIN_TEXT,
    BlockType,
    ButtonStyle,
    ElementType,
)


@dataclass(frozen=True)
class SentimentOption:
    value: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "text": {"type": PLAIN_TEXT, "text": self.text}}


@dataclass(frozen=True)
class HeaderBlock:
    text: str
    emoji: bool = True
    type: BlockType = field(default=BlockType.HEADER, init=False)


@dataclass(frozen=True)
class QuestionBlock:
    """A question with a static select of sentiment options."""

    text: str
    action_id: str
    placeholder: str
    options: Tuple[SentimentOption, ...]
    type: BlockType = field(default=BlockType.SECTION, init=False)


@dataclass(frozen=True)
class FinishBlock:
    """The closing section holding the submit button."""

    text: str
    button_text: str
    style: ButtonStyle = ButtonStyle.PRIMARY
    value: str = FINALIZE
    action_id: str = FINISH_ACTION_ID
    type: BlockType = field(default=BlockType.SECTION, init=False)


Block = Union[HeaderBlock, QuestionBlock, FinishBlock]


def block_to_dict(block: Block) -> Dict[str, Any]:
    """Serialize a block into Slack's JSON shape."""
    if isinstance(block, HeaderBlock):
        return {
            "type": block.type.value,
            "text": {"type": PLAIN_TEXT, "text": block.text, "emoji": block.emoji},
        }
    if isinstance(block, QuestionBlock):
        return {
            "type": block.type.value,
            "text": {"type": MRKDWN, "text": block.text},
            "accessory": {
                "type": ElementType.STATIC_SELECT.value,
                "action_id": block.action_id,
                "placeholder": {"type": PLAIN_TEXT, "text": block.placeholder},
                "options": [o.to_dict() for o in block.options],
            },
        }
    if isinstance(block, FinishBlock):
        return {
            "type": block.type.value,
            "text": {"type": MRKDWN, "text": block.text},
            "accessory": {
                "type": ElementType.BUTTON.value,
                "text": {"type": PLAIN_TEXT, "text": block.button_text},
                "style": block.style.value,
                "value": block.value,
                "action_id": block.action_id,
            },
        }
    raise TypeError(f"Unsupported block: {type(block).__name__}")


@dataclass(frozen=True)
class OpenSurveyMessage:
    channel: str
    blocks: Tuple[Block, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"channel": self.channel, "blocks": [block_to_dict(b) for b in self.blocks]}


@dataclass(frozen=True)
class CloseSurveyMessage:
    text: str
    replace_original: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"replace_original": self.replace_original, "text": self.text}


@dataclass(frozen=True)
class OptInOutResponse:
    """Ephemeral single-header acknowledgement."""

    header: HeaderBlock
    response_type: str = EPHEMERAL

    @property
    def blocks(self) -> List[Block]:
        return [self.header]

    def to_dict(self) -> Dict[str, Any]:
        return {"response_type": self.response_type, "blocks": [block_to_dict(b) for b in self.blocks]}
