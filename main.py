import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

from config import Config, logger, setup_logging
from devex import DevExSurvey, DevExSurveyError
from web import create_and_start_server


def load_survey_config(path: Optional[str]) -> Optional[Dict[str, Any]]:
    """Read a partial survey configuration from a JSON file, if one is set."""
    if not path:
        return None
    return json.loads(Path(path).read_text(encoding="utf-8"))


async def main():
    """
    Main entry point for the application.
    Builds the survey and serves Slack callbacks until cancelled.
    """
    setup_logging(Config.LOG_LEVEL)

    # Validate configuration
    try:
        Config.validate()
        survey = DevExSurvey(Config.SLACK_AUTH_TOKEN, config=load_survey_config(Config.SURVEY_CONFIG_PATH))
    except (ValueError, OSError, DevExSurveyError) as e:
        logger.error(f"Configuration error: {e}")
        return

    runner = await create_and_start_server(survey)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
