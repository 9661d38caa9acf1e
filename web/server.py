import hashlib
import hmac
import inspect
import json
import ssl
import time
from typing import Awaitable, Callable, Optional, Union

from aiohttp import web

from config import Config, Strings
from config.constants import OPT_IN_COMMANDS, OPT_OUT_COMMANDS, SLACK_SIGNATURE_MAX_AGE, OperationResult
from devex.error_utils import handle_exception
from devex.errors import InvalidPayloadError
from devex.logging_utils import current_context, get_logger, payload_context, wrap_operation
from devex.payload_models import SurveyResponse
from devex.survey import DevExSurvey

ResponseSink = Callable[[SurveyResponse], Union[None, Awaitable[None]]]


def log_survey_response(response: SurveyResponse) -> None:
    """Default sink: record the response in the log only."""
    get_logger("web.response_sink", team=response.team).info(
        "survey response", extra={"choices": response.choices, "timestamp": response.timestamp}
    )


def verify_slack_signature(secret: str, timestamp: str, body: bytes, signature: str, now: Optional[float] = None) -> bool:
    """Check a Slack v0 request signature."""
    try:
        age = abs((now if now is not None else time.time()) - int(timestamp))
    except (TypeError, ValueError):
        return False
    if age > SLACK_SIGNATURE_MAX_AGE:
        return False
    basestring = b"v0:" + timestamp.encode() + b":" + body
    expected = "v0=" + hmac.new(secret.encode(), basestring, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature or "")


class WebServer:
    def __init__(self, survey: DevExSurvey, response_sink: Optional[ResponseSink] = None):
        """Initialize the web server."""
        self.survey = survey
        self.response_sink = response_sink or log_survey_response

    @staticmethod
    def _is_authorized(request: web.Request) -> bool:
        """Validate request with X-Auth-Token header when WEB_AUTH_TOKEN is set.

        If `Config.WEB_AUTH_TOKEN` is not set, authorization is not enforced.
        """
        token = Config.WEB_AUTH_TOKEN
        if not token:
            return True
        provided = request.headers.get("X-Auth-Token")
        return provided == token

    @staticmethod
    async def _is_from_slack(request: web.Request) -> bool:
        """Verify the Slack signature when SLACK_SIGNING_SECRET is set."""
        secret = Config.SLACK_SIGNING_SECRET
        if not secret:
            return True
        body = await request.read()
        return verify_slack_signature(
            secret,
            request.headers.get("X-Slack-Request-Timestamp", ""),
            body,
            request.headers.get("X-Slack-Signature", ""),
        )

    async def _record(self, response: SurveyResponse) -> None:
        result = self.response_sink(response)
        if inspect.isawaitable(result):
            await result

    async def slack_interactions(self, request):
        """Handle Slack interactivity callbacks for survey messages."""
        if not await self._is_from_slack(request):
            get_logger("web.interactions").warning("bad signature")
            return web.json_response({"error": "Unauthorized"}, status=401)

        form = await request.post()
        try:
            payload = json.loads(form.get("payload", ""))
        except (TypeError, ValueError):
            get_logger("web.interactions").error("payload is not json")
            return web.json_response({"error": "Invalid payload"}, status=400)

        token = current_context.set({"step_name": "web.interactions", **payload_context(payload)})
        log = get_logger("web.interactions", payload)
        try:
            log.info("request received")
            result = await self.survey.close(payload)
            if result == OperationResult.CLOSED.value:
                await self._record(self.survey.create_survey_response(payload))
            log.info("done", extra={"result": result})
            return web.json_response({"status": result})
        except InvalidPayloadError as e:
            return web.json_response({"error": handle_exception(e)}, status=400)
        except Exception as e:
            return web.json_response({"error": handle_exception(e)}, status=500)
        finally:
            current_context.reset(token)

    async def slack_commands(self, request):
        """Handle the opt-in/opt-out slash command."""
        if not await self._is_from_slack(request):
            get_logger("web.commands").warning("bad signature")
            return web.json_response({"error": "Unauthorized"}, status=401)

        form = await request.post()
        text = str(form.get("text", "")).strip().lower()
        log = get_logger("web.commands", user=form.get("user_name"), team=form.get("team_domain"))
        if text in OPT_IN_COMMANDS:
            log.info("opt in")
            return web.json_response(self.survey.create_opt_in_response())
        if text in OPT_OUT_COMMANDS:
            log.info("opt out")
            return web.json_response(self.survey.create_opt_out_response())
        log.warning("unknown command", extra={"text": text})
        return web.json_response({"error": Strings.UNKNOWN_COMMAND}, status=400)

    async def open_survey_http(self, request):
        """Handle HTTP requests to open surveys for a list of users."""
        if not self._is_authorized(request):
            get_logger("web.open_survey").warning("unauthorized", extra={"path": "/surveys/open"})
            return web.json_response({"error": "Unauthorized"}, status=401)

        try:
            data = await request.json()
        except ValueError:
            return web.json_response({"error": "Invalid JSON"}, status=400)

        users = data.get("users") if isinstance(data, dict) else None
        if not isinstance(users, list) or not all(isinstance(u, str) and u.strip() for u in users):
            get_logger("web.open_survey").error("invalid users", extra={"users": users})
            return web.json_response({"error": "Invalid users"}, status=400)

        wait = data.get("wait", False)
        if not isinstance(wait, bool):
            get_logger("web.open_survey").error("invalid wait flag", extra={"wait": wait})
            return web.json_response({"error": "Invalid wait flag"}, status=400)

        log = get_logger("web.open_survey", recipients=len(users))
        try:
            result = await wrap_operation("survey.open", self.survey.open)(users, wait=wait)
            log.info("done", extra={"result": result})
            return web.json_response({"status": result})
        except Exception as e:
            return web.json_response({"error": handle_exception(e)}, status=500)

    async def health(self, request):
        return web.json_response({"status": "ok"})

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post('/slack/interactions', self.slack_interactions)
        app.router.add_post('/slack/commands', self.slack_commands)
        app.router.add_post('/surveys/open', self.open_survey_http)
        app.router.add_get('/health', self.health)
        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _on_cleanup(self, app: web.Application) -> None:
        await self.survey.wait_for_deliveries()
        close = getattr(self.survey.transport, "close", None)
        if close is not None:
            await close()

    @staticmethod
    async def run_server(survey: DevExSurvey, response_sink: Optional[ResponseSink] = None) -> web.AppRunner:
        """Run the HTTP/HTTPS server"""
        app = WebServer(survey, response_sink).create_app()

        port = int(Config.PORT or "3000")
        host = Config.HOST
        ssl_context = None

        if Config.SSL_CERT_PATH and Config.SSL_KEY_PATH:
            ssl_context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
            ssl_context.load_cert_chain(
                certfile=Config.SSL_CERT_PATH,
                keyfile=Config.SSL_KEY_PATH
            )

        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host, port, ssl_context=ssl_context)
        await site.start()
        get_logger("web.server").info("server started", extra={"host": host, "port": port})
        return runner


async def create_and_start_server(survey: DevExSurvey, response_sink: Optional[ResponseSink] = None) -> web.AppRunner:
    return await WebServer.run_server(survey, response_sink)
