"""User-safe texts for reply generation failures."""

from app.exceptions import CompletionErrorKind

COMPLETION_ERROR_MESSAGES = {
    CompletionErrorKind.CONFIG: "Service configuration error. Please contact support.",
    CompletionErrorKind.RATE_LIMIT: (
        "Our service is experiencing high demand. Please try again in a moment."
    ),
    CompletionErrorKind.TIMEOUT: "The request took too long. Please try again.",
    CompletionErrorKind.GENERIC: (
        "I apologize, but I encountered an issue processing your request. "
        "Please try again."
    ),
    CompletionErrorKind.EMPTY_RESPONSE: "No response generated from AI",
}

SUMMARY_FAILED_MESSAGE = "Could not generate conversation summary"
