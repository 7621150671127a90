"""Provider-agnostic request dataclass."""

import dataclasses

from wen.config import DEFAULT_MAX_TOKENS, Config
from wen.prompts import TERMINAL_MARKUP_PROMPT
from wen.provider import ProviderKind


@dataclasses.dataclass(frozen=True)
class NormalizedRequest:
    """What to ask, before any vendor-specific wire encoding."""

    model: str
    system_prompt: str
    user_text: str
    streaming: bool
    provider: ProviderKind = ProviderKind.CHAT_COMPLETION
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_config(cls, config: Config, question: str) -> "NormalizedRequest":
        """Build a request for ``question`` using the loaded configuration.

        Buffered answers are rendered in one piece, so only then is the model
        told about the color and style tags.
        """
        system_prompt = config.prompt_template
        if not config.stream:
            system_prompt = f"{system_prompt} {TERMINAL_MARKUP_PROMPT}"
        return cls(
            model=config.model,
            system_prompt=system_prompt,
            user_text=question,
            streaming=config.stream,
            provider=ProviderKind.parse(config.provider),
            max_tokens=config.max_tokens,
        )
