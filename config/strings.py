# User-facing strings. Survey texts are the defaults used unless a survey
# configuration override replaces them.
class Strings:
    # Survey headings
    HEADING = "Developer Experience survey"
    OPTIONS_PLACEHOLDER = "I feel..."
    FINISH_HEADING = "*Finish*"
    FINISH_BUTTON_TEXT = "Finish the survey :tada:"

    # Acknowledgements
    OPT_IN_MESSAGE = "You are now opted-in to the developer experience survey!"
    OPT_OUT_MESSAGE = "You are now opted-out from the developer experience survey."
    COMPLETED_MESSAGE = "Thanks for taking the time to share with us!"

    # Questions, in the order they are asked
    QUESTIONS = (
        "*1. How has your day been?*",
        "*2. Did you make progress toward your goals today?*\n"
        "Consider the clarity of goals, how engaging the work is, your control of the structure of work...",
        "*3. Have you been able to focus today?*\n"
        "Consider the number of meetings, interruptions, unplanned work...",
        "*4. Is your tooling working well and fast?*\n"
        "Consider CI, code tools, platform tools, build and test times, code review times...",
        "*5. Is the cognitive load manageable?*\n"
        "Consider project complexity, friction, processes, communication...",
    )

    # Sentiment options as (text, value)
    OPTIONS = (
        ("Positive", "positive"),
        ("Neutral", "neutral"),
        ("Negative", "negative"),
    )

    # Errors
    TRY_AGAIN_LATER = "Something went wrong. Please try again later."
    UNKNOWN_COMMAND = "Use `in` to opt in or `out` to opt out of the survey."
