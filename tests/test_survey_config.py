import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.append(str(ROOT))

from config import Strings
from devex.errors import InvalidConfigurationError, MissingRequiredOptionsParametersError
from devex.survey_config import (
    BASE_CONFIGURATION,
    SurveyOption,
    create_configuration,
    merge_configuration,
    validate_configuration,
)


def test_defaults_without_override():
    config = create_configuration()
    assert config == BASE_CONFIGURATION
    assert config.heading == Strings.HEADING
    assert len(config.questions) == 5
    assert [o.value for o in config.options] == ["positive", "neutral", "negative"]


def test_partial_override_is_field_level():
    override = {
        "heading": "My survey",
        "completed_message": "<3",
        "options": [
            {"text": "Super", "value": "super"},
            {"text": "OK", "value": "ok"},
            {"text": "Nope", "value": "nope"},
        ],
    }
    config = create_configuration(override)

    assert config.heading == "My survey"
    assert config.completed_message == "<3"
    assert config.options == (
        SurveyOption("Super", "super"),
        SurveyOption("OK", "ok"),
        SurveyOption("Nope", "nope"),
    )
    # Untouched fields come from the defaults
    assert config.options_placeholder == BASE_CONFIGURATION.options_placeholder
    assert config.finish_heading == BASE_CONFIGURATION.finish_heading
    assert config.opt_in_message == BASE_CONFIGURATION.opt_in_message
    assert config.questions == BASE_CONFIGURATION.questions


def test_sequence_override_replaces_whole_sequence():
    config = create_configuration({"options": [{"text": "Only", "value": "only"}]})
    assert config.options == (SurveyOption("Only", "only"),)


def test_camel_case_keys_are_accepted():
    config = create_configuration({"completedMessage": "done", "optInMessage": "hi"})
    assert config.completed_message == "done"
    assert config.opt_in_message == "hi"


def test_none_values_fall_back_to_defaults():
    config = create_configuration({"heading": None, "questions": None})
    assert config.heading == BASE_CONFIGURATION.heading
    assert config.questions == BASE_CONFIGURATION.questions


def test_unknown_keys_are_ignored(caplog):
    config = create_configuration({"colour": "blue"})
    assert config == BASE_CONFIGURATION
    assert any(r.getMessage() == "ignoring unknown configuration key" for r in caplog.records)


def test_override_does_not_leak_into_defaults():
    create_configuration({"heading": "Changed", "questions": ["Only one?"]})
    assert BASE_CONFIGURATION.heading == Strings.HEADING
    assert create_configuration().questions == tuple(Strings.QUESTIONS)


def test_accepts_configuration_instance():
    custom = merge_configuration({"heading": "From instance"})
    assert create_configuration(custom).heading == "From instance"


@pytest.mark.parametrize("field", [
    "heading",
    "options_placeholder",
    "finish_heading",
    "finish_button_text",
    "opt_in_message",
    "opt_out_message",
    "completed_message",
])
def test_empty_string_field_is_invalid(field):
    with pytest.raises(InvalidConfigurationError):
        create_configuration({field: ""})


def test_empty_questions_is_invalid():
    with pytest.raises(InvalidConfigurationError):
        create_configuration({"questions": []})


def test_empty_options_is_invalid():
    with pytest.raises(InvalidConfigurationError):
        create_configuration({"options": []})


def test_questions_must_be_a_list():
    with pytest.raises(InvalidConfigurationError):
        create_configuration({"questions": "How are you?"})


def test_option_without_value_is_rejected():
    with pytest.raises(MissingRequiredOptionsParametersError):
        create_configuration({"options": [{"text": "Positive"}]})


def test_option_without_text_is_rejected():
    with pytest.raises(MissingRequiredOptionsParametersError):
        create_configuration({"options": [{"text": "", "value": "positive"}]})


def test_option_of_wrong_type_is_rejected():
    with pytest.raises(MissingRequiredOptionsParametersError):
        create_configuration({"options": ["positive"]})


def test_validate_rejects_missing_configuration():
    with pytest.raises(InvalidConfigurationError):
        validate_configuration(None)


def test_to_dict_uses_lists():
    data = BASE_CONFIGURATION.to_dict()
    assert data["questions"] == list(Strings.QUESTIONS)
    assert data["options"][0] == {"text": "Positive", "value": "positive"}
