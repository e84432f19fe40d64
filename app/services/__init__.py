from app.services.conversation_manager import ConversationManager
from app.services.conversation_service import ConversationService
from app.services.document_service import DocumentService
from app.services.message_service import MessageService
from app.services.system_prompt_service import SystemPromptService

__all__ = [
    "ConversationManager",
    "ConversationService",
    "DocumentService",
    "MessageService",
    "SystemPromptService",
]
