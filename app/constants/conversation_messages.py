"""Fixed assistant messages appended by the conversation lifecycle."""

# Messages containing this phrase are left out of reopen summaries.
CLOSURE_PHRASE = "closed due to inactivity"

CLOSED_MESSAGE = (
    "This conversation has been closed due to inactivity. If you need further "
    "assistance, you can reopen this chat to continue where we left off, or start "
    "a new conversation. We're here to help!"
)

WARNING_MESSAGE = (
    "Are you still there? This chat will automatically close in 1 minute if "
    "there's no response. Feel free to send a message if you need more help!"
)

REOPENED_TEMPLATE = (
    "Welcome back! Here's a quick summary of our previous conversation:\n\n"
    "{summary}\n\nHow can I continue to help you?"
)

SUMMARY_UNAVAILABLE = "Unable to generate summary of previous conversation."

SUMMARY_PROMPT = """Summarize the following customer support conversation in 2-3 sentences.
IMPORTANT: Write the summary in SECOND PERSON, addressing the customer directly as "you" (not "the customer" or "they").
For example: "You asked about shipping options..." NOT "The customer asked about shipping options..."
Focus on what they asked about and what was resolved or discussed:"""


def reopened_message(summary: str) -> str:
    return REOPENED_TEMPLATE.format(summary=summary)
