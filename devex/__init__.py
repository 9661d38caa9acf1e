from devex.errors import (
    DevExSurveyError,
    DeliveryError,
    InvalidConfigurationError,
    InvalidPayloadError,
    MissingRequiredOptionsParametersError,
    MissingRequiredParametersError,
)
from devex.payload_models import CallbackPayload, SurveyResponse, validate_payload
from devex.survey import DevExSurvey, create_new_devex_survey
from devex.survey_config import BASE_CONFIGURATION, SurveyConfiguration, SurveyOption
from devex.webhook import DeliveryResult, SlackTransport

__all__ = [
    'DevExSurvey',
    'create_new_devex_survey',
    'SurveyConfiguration',
    'SurveyOption',
    'BASE_CONFIGURATION',
    'CallbackPayload',
    'SurveyResponse',
    'validate_payload',
    'SlackTransport',
    'DeliveryResult',
    'DevExSurveyError',
    'DeliveryError',
    'InvalidConfigurationError',
    'InvalidPayloadError',
    'MissingRequiredOptionsParametersError',
    'MissingRequiredParametersError',
]
