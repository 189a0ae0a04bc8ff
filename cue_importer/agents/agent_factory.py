"""Factory for the agents used by the remote classification stage."""

from typing import Any

from agents.extensions.models.litellm_model import LitellmModel

from agents import Agent, ModelSettings
from cue_importer.common.openai_model_identifier import OpenAIModelIdentifier

# Identifiers served through LiteLLM instead of the OpenAI API
LITELLM_MODEL_MAP: dict[OpenAIModelIdentifier, str] = {
    OpenAIModelIdentifier.GPT_OSS_120B: "ollama/gpt-oss:120b-cloud",
}


def resolve_model(
    model_identifier: OpenAIModelIdentifier,
) -> str | LitellmModel:
    """Resolve a model identifier to something an Agent accepts.

    Args:
        model_identifier: The configured model identifier.

    Returns:
        The OpenAI model name, or a LitellmModel for locally routed models.
    """
    if model_identifier in LITELLM_MODEL_MAP:
        return LitellmModel(model=LITELLM_MODEL_MAP[model_identifier])
    return model_identifier.value


def create_agent(
    *,
    name: str,
    instructions: str,
    model_identifier: OpenAIModelIdentifier,
    max_tokens: int | None = None,
) -> Agent[Any]:
    """Create a plain-text agent.

    Classification replies are decoded by the caller, so no structured
    output type is attached here.

    Args:
        name: The agent name shown in traces.
        instructions: System instructions.
        model_identifier: The model to run.
        max_tokens: Optional cap on the reply length.

    Returns:
        A configured Agent instance.
    """
    agent_kwargs: dict[str, Any] = {
        "name": name,
        "instructions": instructions,
        "model": resolve_model(model_identifier),
    }

    if max_tokens is not None:
        agent_kwargs["model_settings"] = ModelSettings(max_tokens=max_tokens)

    return Agent(**agent_kwargs)
