import asyncio
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.append(str(ROOT))

from devex import create_new_devex_survey
from devex.errors import (
    InvalidConfigurationError,
    InvalidPayloadError,
    MissingRequiredOptionsParametersError,
    MissingRequiredParametersError,
)
from devex.payload_models import CallbackAction, CallbackPayload
from devex.survey_config import BASE_CONFIGURATION
from devex.webhook import DeliveryResult

AUTH_TOKEN = "xoxb-something"


def load_payload_example(name: str = "receive_webhook_event") -> dict:
    return json.loads((ROOT / "tests" / "testdata" / f"{name}.json").read_text())


class FakeTransport:
    """Records posts instead of calling Slack."""

    def __init__(self, ok: bool = True, delay: float = 0):
        self.ok = ok
        self.delay = delay
        self.posts = []

    async def post(self, url, data, auth_token=None):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.posts.append({"url": url, "data": data, "auth_token": auth_token})
        return DeliveryResult(ok=self.ok, status=200 if self.ok else 500)


def make_survey(transport=None, config=None):
    return create_new_devex_survey(AUTH_TOKEN, config=config, transport=transport or FakeTransport())


def test_default_configuration():
    assert make_survey().config == BASE_CONFIGURATION


def test_partial_custom_configuration():
    survey = make_survey(config={"heading": "My survey", "completed_message": "<3"})
    assert survey.config.heading == "My survey"
    assert survey.config.completed_message == "<3"
    assert survey.config.questions == BASE_CONFIGURATION.questions


def test_missing_auth_token():
    with pytest.raises(MissingRequiredParametersError):
        create_new_devex_survey("")
    with pytest.raises(MissingRequiredParametersError):
        create_new_devex_survey(None)


def test_invalid_configuration_prevents_construction():
    with pytest.raises(InvalidConfigurationError):
        make_survey(config={"questions": []})
    with pytest.raises(InvalidConfigurationError):
        make_survey(config={"options": []})
    with pytest.raises(MissingRequiredOptionsParametersError):
        make_survey(config={"options": [{"text": "Yes"}]})


def test_configuration_error_comes_before_token_check():
    with pytest.raises(InvalidConfigurationError):
        create_new_devex_survey("", config={"heading": ""})


@pytest.mark.asyncio
async def test_open_returns_without_waiting():
    transport = FakeTransport(delay=0.05)
    survey = make_survey(transport)

    result = await survey.open(["sam_person"])

    assert result == "opened"
    assert transport.posts == []
    await survey.wait_for_deliveries()
    assert len(transport.posts) == 1
    post = transport.posts[0]
    assert post["url"] == "https://slack.com/api/chat.postMessage"
    assert post["auth_token"] == AUTH_TOKEN
    assert post["data"]["channel"] == "sam_person"
    assert len(post["data"]["blocks"]) == 7


@pytest.mark.asyncio
async def test_open_reports_opened_on_delivery_failure():
    transport = FakeTransport(ok=False)
    survey = make_survey(transport)
    assert await survey.open(["user1"]) == "opened"
    await survey.wait_for_deliveries()
    assert len(transport.posts) == 1


@pytest.mark.asyncio
async def test_open_sends_one_message_per_user():
    transport = FakeTransport()
    survey = make_survey(transport)
    await survey.open(["a", "b", "c"])
    await survey.wait_for_deliveries()
    assert sorted(p["data"]["channel"] for p in transport.posts) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_open_wait_mode_reports_failures():
    assert await make_survey(FakeTransport(ok=True)).open(["a", "b"], wait=True) == "opened"
    assert await make_survey(FakeTransport(ok=False)).open(["a", "b"], wait=True) == "failed"


@pytest.mark.asyncio
async def test_open_with_no_users():
    transport = FakeTransport()
    assert await make_survey(transport).open([]) == "opened"
    assert transport.posts == []


@pytest.mark.asyncio
async def test_close_survey():
    transport = FakeTransport()
    survey = make_survey(transport)
    payload = load_payload_example()

    result = await survey.close(payload)

    assert result == "closed"
    assert transport.posts == [
        {
            "url": payload["response_url"],
            "data": {"replace_original": True, "text": "Thanks for taking the time to share with us!"},
            "auth_token": None,
        }
    ]


@pytest.mark.asyncio
async def test_close_accepts_typed_payload():
    survey = make_survey()
    assert await survey.close(CallbackPayload.from_dict(load_payload_example())) == "closed"


@pytest.mark.asyncio
async def test_close_ignores_delivery_failure():
    assert await make_survey(FakeTransport(ok=False)).close(load_payload_example()) == "closed"


@pytest.mark.asyncio
async def test_close_fails_without_finalize():
    transport = FakeTransport()
    payload = load_payload_example()
    payload["actions"][0]["value"] = "positive"
    assert await make_survey(transport).close(payload) == "failed"
    assert transport.posts == []


@pytest.mark.asyncio
async def test_close_fails_when_partially_answered():
    payload = load_payload_example()
    first_block = next(iter(payload["state"]["values"]))
    payload["state"]["values"][first_block]["Choice-0"].pop("selected_option")
    assert await make_survey().close(payload) == "failed"


@pytest.mark.asyncio
async def test_close_fails_without_response_url():
    payload = load_payload_example()
    payload["response_url"] = ""
    assert await make_survey().close(payload) == "failed"


@pytest.mark.asyncio
async def test_close_with_more_questions_configured():
    survey = make_survey(config={"questions": ["1", "2", "3", "4", "5", "6"]})
    assert await survey.close(load_payload_example()) == "failed"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["actions", "user", "team", "state"])
async def test_close_rejects_invalid_payload(field):
    transport = FakeTransport()
    payload = load_payload_example()
    payload.pop(field)
    with pytest.raises(InvalidPayloadError):
        await make_survey(transport).close(payload)
    assert transport.posts == []


@pytest.mark.asyncio
async def test_close_rejects_empty_team():
    payload = load_payload_example()
    payload["team"] = {}
    with pytest.raises(InvalidPayloadError):
        await make_survey().close(payload)


def test_create_survey_response():
    survey = make_survey()

    result = survey.create_survey_response(load_payload_example())

    assert isinstance(result.timestamp, int)
    assert len(str(result.timestamp)) == 13
    data = result.to_dict()
    del data["timestamp"]
    assert data == {
        "team": "some-domain",
        "choices": ["positive", "negative", "positive", "neutral", "positive"],
    }


def test_create_survey_response_with_unanswered():
    payload = load_payload_example()
    payload["state"]["values"] = {"x": {"Choice-0": {"selected_option": {"value": "neutral"}}}, "y": {"Choice-1": {}}}
    assert make_survey().create_survey_response(payload).choices == ("neutral",)


@pytest.mark.parametrize("field", ["actions", "user", "team", "state"])
def test_create_survey_response_rejects_invalid_payload(field):
    payload = load_payload_example()
    payload.pop(field)
    with pytest.raises(InvalidPayloadError):
        make_survey().create_survey_response(payload)


def test_create_opt_in_response():
    assert make_survey().create_opt_in_response() == {
        "blocks": [
            {
                "text": {
                    "emoji": True,
                    "text": "You are now opted-in to the developer experience survey!",
                    "type": "plain_text",
                },
                "type": "header",
            }
        ],
        "response_type": "ephemeral",
    }


def test_create_opt_out_response():
    assert make_survey().create_opt_out_response() == {
        "blocks": [
            {
                "text": {
                    "emoji": True,
                    "text": "You are now opted-out from the developer experience survey.",
                    "type": "plain_text",
                },
                "type": "header",
            }
        ],
        "response_type": "ephemeral",
    }


def test_custom_opt_out_message():
    survey = make_survey(config={"opt_out_message": "Bye!"})
    assert survey.create_opt_out_response()["blocks"][0]["text"]["text"] == "Bye!"


def test_instances_do_not_share_configuration():
    make_survey(config={"heading": "First"})
    assert make_survey().config.heading == BASE_CONFIGURATION.heading


def test_survey_response_choices_are_immutable():
    result = make_survey().create_survey_response(load_payload_example())

    assert isinstance(result.choices, tuple)
    with pytest.raises(AttributeError):
        result.choices.append("hacked")
    assert result.choices == ("positive", "negative", "positive", "neutral", "positive")
    assert result.to_dict()["choices"] == ["positive", "negative", "positive", "neutral", "positive"]


@pytest.mark.asyncio
async def test_typed_payload_without_state_is_rejected():
    payload = CallbackPayload(
        user_name="sam_person",
        team_domain="some-domain",
        actions=[CallbackAction(value="finalize")],
        state_values=None,
    )
    survey = make_survey()
    with pytest.raises(InvalidPayloadError):
        survey.create_survey_response(payload)
    with pytest.raises(InvalidPayloadError):
        await survey.close(payload)
