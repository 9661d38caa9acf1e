from __future__ import annotations

from typing import Any, List, Mapping, Optional

from config.constants import FINALIZE
from devex.payload_models import CallbackPayload


def _selected_value(entry: Any) -> Optional[str]:
    """Return ``selected_option.value`` of the single selection in ``entry``.

    Slack nests each answer under an element key we do not know in advance,
    so the first (only) child is taken.
    """
    if not isinstance(entry, Mapping) or not entry:
        return None
    selection = next(iter(entry.values()))
    if not isinstance(selection, Mapping):
        return None
    option = selection.get("selected_option")
    if not isinstance(option, Mapping):
        return None
    return option.get("value")


def get_choice_values(state_values: Mapping[str, Any]) -> List[str]:
    """Extract the selected values in the order the blocks appear.

    Unanswered questions are dropped, so the result can be shorter than the
    number of questions.
    """
    choices = []
    for entry in state_values.values():
        value = _selected_value(entry)
        if value:
            choices.append(value)
    return choices


def is_closable(payload: CallbackPayload, question_count: int) -> bool:
    """True when every question is answered and the finalize button was pushed."""
    if not payload.response_url:
        return False
    if len(get_choice_values(payload.state_values)) != question_count:
        return False
    return payload.first_action_value == FINALIZE
