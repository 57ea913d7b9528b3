"""A minimal client for OpenAI-compatible chat completion APIs."""

__version__ = "0.1.0"

from .client import OpenAIClient, decode_body
from .config import ClientConfig, PRESETS, load_config, resolve_base_url
from .errors import (
    ApiError,
    ApiErrorKind,
    ConfigError,
    DecodeError,
    OpenAIClientError,
    ResponseReadError,
    TransportError,
    error_for_status,
)
from .models import (
    Choice,
    ChoiceMessage,
    Completion,
    CompletionRequest,
    Message,
    Model,
    ModelListResponse,
    Usage,
)
