from web.server import WebServer, create_and_start_server, log_survey_response, verify_slack_signature

__all__ = [
    "WebServer",
    "create_and_start_server",
    "log_survey_response",
    "verify_slack_signature",
]
