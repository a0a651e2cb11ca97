from weavex.models.messages import (
    AssistantMessage, AssistantTurn, Message, SystemMessage, ToolCall,
    ToolMessage, ToolResult, ToolSchema, UserMessage,
)
from weavex.models.results import AgentState, TerminationReason
from weavex.models.web import FetchResponse, SearchResponse, SearchResult

__all__ = [
    "AssistantMessage", "AssistantTurn", "Message", "SystemMessage", "ToolCall",
    "ToolMessage", "ToolResult", "ToolSchema", "UserMessage",
    "AgentState", "TerminationReason",
    "FetchResponse", "SearchResponse", "SearchResult",
]
