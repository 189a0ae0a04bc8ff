"""Agent that classifies audio filenames the local heuristics were unsure about."""

from agents import Runner
from cue_importer.agents.agent_factory import create_agent
from cue_importer.common.openai_model_identifier import OpenAIModelIdentifier

MAX_REPLY_TOKENS = 2048

CUE_CLASSIFIER_INSTRUCTIONS = """\
You are an expert at classifying audio files for music cue sheets.

Given a list of audio filenames from a video editing project, classify each one:
- "music" = Production music track (for cue sheet)
- "sfx" = Sound effect (whoosh, hit, stinger, transition)
- "stem" = Part of a larger music track (drums, bass, vocals, etc.)
- "non_music" = Camera audio, interview, voiceover, dialogue, temp audio

Also provide a clean display name for music/sfx tracks.
"""

CUE_CLASSIFIER_RESPONSE_FORMAT = """\
Return JSON array:
[
  {
    "index": 1,
    "classification": "music" | "sfx" | "stem" | "non_music",
    "displayName": "Clean Track Name",
    "library": "Library name if detectable" or null,
    "confidence": 0.0 to 1.0,
    "reasoning": "brief explanation"
  }
]

Return ONLY the JSON array."""


def build_classification_prompt(filenames: list[str]) -> str:
    """Number the filenames from 1 and ask for one JSON entry per file."""
    clip_list = "\n".join(f'{index}. "{name}"' for index, name in enumerate(filenames, start=1))
    return f"Classify these audio files:\n\n{clip_list}\n\n{CUE_CLASSIFIER_RESPONSE_FORMAT}"


class CueClassifierAgent:
    """``RemoteClassifier`` backed by an LLM agent."""

    def __init__(self, model_identifier: OpenAIModelIdentifier) -> None:
        self._agent = create_agent(
            name="CueClassifierAgent",
            instructions=CUE_CLASSIFIER_INSTRUCTIONS,
            model_identifier=model_identifier,
            max_tokens=MAX_REPLY_TOKENS,
        )

    async def classify_batch(self, filenames: list[str]) -> str:
        """Classify a batch of filenames.

        Args:
            filenames: Original clip names, in the order the reply should index them.

        Returns:
            The raw reply text. Decoding is left to the caller.
        """
        result = await Runner.run(self._agent, build_classification_prompt(filenames))
        return str(result.final_output)
