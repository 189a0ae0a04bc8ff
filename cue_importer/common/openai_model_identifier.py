"""Model identifiers available to the remote classifier."""

from enum import StrEnum


class OpenAIModelIdentifier(StrEnum):
    """Supported model identifiers for cue classification agents."""

    GPT_5_2 = "gpt-5.2-2025-12-11"
    GPT_5_MINI = "gpt-5-mini"
    GPT_OSS_120B = "gpt-oss-120b"
