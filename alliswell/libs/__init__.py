from alliswell.libs.completions import (
    ChatCompletionsClient,
    Completion,
    CompletionClient,
    CompletionError,
)

__all__ = [
    "ChatCompletionsClient",
    "Completion",
    "CompletionClient",
    "CompletionError",
]
