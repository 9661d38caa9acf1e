from __future__ import annotations

from typing import List, Tuple

from config.constants import CHOICE_ACTION_PREFIX
from devex.blocks import (
    Block,
    CloseSurveyMessage,
    FinishBlock,
    HeaderBlock,
    OpenSurveyMessage,
    OptInOutResponse,
    QuestionBlock,
    SentimentOption,
)
from devex.survey_config import SurveyConfiguration


def produce_sentiment_options(config: SurveyConfiguration) -> Tuple[SentimentOption, ...]:
    return tuple(SentimentOption(value=o.value, text=o.text) for o in config.options)


def produce_header_section(config: SurveyConfiguration) -> HeaderBlock:
    return HeaderBlock(text=config.heading)


def produce_questions_section(config: SurveyConfiguration) -> List[QuestionBlock]:
    """One select per question, identified as ``Choice-<index>``."""
    options = produce_sentiment_options(config)
    return [
        QuestionBlock(
            text=question,
            action_id=f"{CHOICE_ACTION_PREFIX}{index}",
            placeholder=config.options_placeholder,
            options=options,
        )
        for index, question in enumerate(config.questions)
    ]


def produce_finishing_section(config: SurveyConfiguration) -> FinishBlock:
    return FinishBlock(text=config.finish_heading, button_text=config.finish_button_text)


def produce_open_survey_message(config: SurveyConfiguration, channel_id: str) -> OpenSurveyMessage:
    """Build the message that opens a survey for one user or channel."""
    blocks: List[Block] = [produce_header_section(config)]
    blocks.extend(produce_questions_section(config))
    blocks.append(produce_finishing_section(config))
    return OpenSurveyMessage(channel=channel_id, blocks=tuple(blocks))


def produce_close_survey_message(config: SurveyConfiguration) -> CloseSurveyMessage:
    """Build the message that replaces a finished survey in place."""
    return CloseSurveyMessage(text=config.completed_message)


def produce_opt_in_out_response(text: str) -> OptInOutResponse:
    return OptInOutResponse(header=HeaderBlock(text=text))


def produce_opt_in_response(config: SurveyConfiguration) -> OptInOutResponse:
    return produce_opt_in_out_response(config.opt_in_message)


def produce_opt_out_response(config: SurveyConfiguration) -> OptInOutResponse:
    return produce_opt_in_out_response(config.opt_out_message)
