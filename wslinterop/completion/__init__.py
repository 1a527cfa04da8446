from .cache import CompletionFunctionCache, CompletionFunctionFileCache
from .cursor import CursorContext, Token, locate_tokens, resolve_cursor
from .protocol import CompletionBridge, CompletionCandidate
from .resolver import FALLBACK_FUNCTION, CompletionFunctionResolver

__all__ = [
    "FALLBACK_FUNCTION",
    "CompletionBridge",
    "CompletionCandidate",
    "CompletionFunctionCache",
    "CompletionFunctionFileCache",
    "CompletionFunctionResolver",
    "CursorContext",
    "Token",
    "locate_tokens",
    "resolve_cursor",
]
