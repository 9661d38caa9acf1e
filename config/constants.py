from enum import Enum

# Value carried by the submit button; a callback whose first action has this
# value is a finalize click.
FINALIZE = "finalize"

# action_id of the submit button
FINISH_ACTION_ID = "button"

# Question selects are identified as "Choice-0", "Choice-1", ...
CHOICE_ACTION_PREFIX = "Choice-"

# Slack text object types
PLAIN_TEXT = "plain_text"
MRKDWN = "mrkdwn"

# Slack response types
EPHEMERAL = "ephemeral"


class BlockType(str, Enum):
    """Slack block kinds used by survey messages."""
    HEADER = "header"
    SECTION = "section"


class ElementType(str, Enum):
    """Slack accessory element kinds used by survey messages."""
    STATIC_SELECT = "static_select"
    BUTTON = "button"


class ButtonStyle(str, Enum):
    PRIMARY = "primary"
    DANGER = "danger"


class OperationResult(str, Enum):
    """Outcome reported by survey operations."""
    OPENED = "opened"
    CLOSED = "closed"
    FAILED = "failed"


# Slash command arguments accepted for opting in and out
OPT_IN_COMMANDS = {"in", "opt-in", "optin"}
OPT_OUT_COMMANDS = {"out", "opt-out", "optout"}

# Maximum accepted clock skew for signed Slack requests, in seconds
SLACK_SIGNATURE_MAX_AGE = 60 * 5
