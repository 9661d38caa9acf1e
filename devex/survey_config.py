"""Survey configuration: built-in defaults, merging of user overrides and
validation.

A configuration is produced once per survey instance by layering a partial
override on top of ``BASE_CONFIGURATION`` field by field. Sequences are
replaced wholesale, never merged entry by entry. The result is frozen.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from config import Strings
from devex.errors import InvalidConfigurationError, MissingRequiredOptionsParametersError
from devex.logging_utils import get_logger


@dataclass(frozen=True)
class SurveyOption:
    """A selectable sentiment option."""

    # Shown to the user. Plain text only.
    text: str
    # Transferred and persisted when selected.
    value: str


@dataclass(frozen=True)
class SurveyConfiguration:
    """All user-facing texts of a survey and its fixed option set."""

    heading: str
    options_placeholder: str
    finish_heading: str
    finish_button_text: str
    opt_in_message: str
    opt_out_message: str
    completed_message: str
    questions: Tuple[str, ...]
    options: Tuple[SurveyOption, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["questions"] = list(self.questions)
        data["options"] = [asdict(o) for o in self.options]
        return data


SurveyConfigurationInput = Union[Mapping[str, Any], SurveyConfiguration]

STRING_FIELDS = (
    "heading",
    "options_placeholder",
    "finish_heading",
    "finish_button_text",
    "opt_in_message",
    "opt_out_message",
    "completed_message",
)

# Keys as they appear in JSON survey configs shared with the Slack app
CAMEL_CASE_ALIASES = {
    "optionsPlaceholder": "options_placeholder",
    "finishHeading": "finish_heading",
    "finishButtonText": "finish_button_text",
    "optInMessage": "opt_in_message",
    "optOutMessage": "opt_out_message",
    "completedMessage": "completed_message",
}

BASE_CONFIGURATION = SurveyConfiguration(
    heading=Strings.HEADING,
    options_placeholder=Strings.OPTIONS_PLACEHOLDER,
    finish_heading=Strings.FINISH_HEADING,
    finish_button_text=Strings.FINISH_BUTTON_TEXT,
    opt_in_message=Strings.OPT_IN_MESSAGE,
    opt_out_message=Strings.OPT_OUT_MESSAGE,
    completed_message=Strings.COMPLETED_MESSAGE,
    questions=tuple(Strings.QUESTIONS),
    options=tuple(SurveyOption(text=text, value=value) for text, value in Strings.OPTIONS),
)


def _coerce_option(option: Any) -> SurveyOption:
    if isinstance(option, SurveyOption):
        return option
    if isinstance(option, Mapping):
        return SurveyOption(text=option.get("text"), value=option.get("value"))
    raise MissingRequiredOptionsParametersError()


def _coerce_sequence(name: str, value: Any) -> Tuple[Any, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidConfigurationError(f'Configuration field "{name}" must be a list')
    if name == "options":
        return tuple(_coerce_option(o) for o in value)
    return tuple(value)


def _normalize_override(override: SurveyConfigurationInput) -> Dict[str, Any]:
    """Turn an override into a dict keyed by field name, dropping ``None`` values."""

    if isinstance(override, SurveyConfiguration):
        return {f.name: getattr(override, f.name) for f in fields(override)}
    if not isinstance(override, Mapping):
        raise InvalidConfigurationError("Configuration override must be a mapping")

    known = {f.name for f in fields(SurveyConfiguration)}
    normalized: Dict[str, Any] = {}
    for key, value in override.items():
        name = CAMEL_CASE_ALIASES.get(key, key)
        if name not in known:
            get_logger("survey.config").warning("ignoring unknown configuration key", extra={"key": key})
            continue
        if value is None:
            continue
        normalized[name] = value
    return normalized


def merge_configuration(override: Optional[SurveyConfigurationInput] = None) -> SurveyConfiguration:
    """Layer ``override`` onto the base configuration, field by field.

    ``BASE_CONFIGURATION`` is never modified; a fresh instance is returned.
    """
    if not override:
        return BASE_CONFIGURATION

    values = {f.name: getattr(BASE_CONFIGURATION, f.name) for f in fields(SurveyConfiguration)}
    for name, value in _normalize_override(override).items():
        if name in ("questions", "options"):
            value = _coerce_sequence(name, value)
        values[name] = value
    return SurveyConfiguration(**values)


def validate_configuration(config: Optional[SurveyConfiguration]) -> None:
    """Validate the combined configuration (base and user input).

    Raises:
        InvalidConfigurationError: a text field is empty, or there are no
            questions or no options.
        MissingRequiredOptionsParametersError: an option lacks text or value.
    """
    if config is None:
        raise InvalidConfigurationError()

    for name in STRING_FIELDS:
        value = getattr(config, name, None)
        if not value or not isinstance(value, str):
            raise InvalidConfigurationError()

    if not config.questions or not config.options:
        raise InvalidConfigurationError()

    for option in config.options:
        if not option.text or not option.value:
            raise MissingRequiredOptionsParametersError()


def create_configuration(override: Optional[SurveyConfigurationInput] = None) -> SurveyConfiguration:
    """Merge ``override`` with the defaults and validate the result."""

    configuration = merge_configuration(override)
    validate_configuration(configuration)
    get_logger("survey.config").debug(
        "configuration ready",
        extra={"questions": len(configuration.questions), "options": len(configuration.options)},
    )
    return configuration
