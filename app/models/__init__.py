from app.models.conversation import Conversation, ConversationStatus
from app.models.document import Document, DocumentChunk
from app.models.message import Attachment, Message, MessageSender
from app.models.system_prompt import SystemPrompt, SystemPromptVersion

__all__ = [
    "Attachment",
    "Conversation",
    "ConversationStatus",
    "Document",
    "DocumentChunk",
    "Message",
    "MessageSender",
    "SystemPrompt",
    "SystemPromptVersion",
]
