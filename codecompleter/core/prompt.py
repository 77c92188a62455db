"""
prompt.py

Turns extracted context into the request sent to the model. A single fixed
template is used; it names the language both in the instruction and as the
fence annotation, which models follow more reliably than either alone.
"""

import string
from dataclasses import dataclass

from .errors import ConfigError

TEMPLATE_FIELDS = frozenset({"language", "context"})


@dataclass(frozen=True)
class CompletionRequest:
    system_prompt: str
    user_prompt: str
    language_tag: str
    max_tokens: int
    temperature: float
    model: str = "LLaMA_CPP"


def check_template(template):
    """
    Validate an instruction template.

    The template must be a str.format string using only the named fields
    {language} and {context}, each at least once. Raises ConfigError otherwise.
    """
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as e:
        raise ConfigError(f"instruction template is not a valid format string: {e}") from e

    names = set()
    for _, field_name, format_spec, _ in parsed:
        if field_name is None:
            continue
        if field_name == "" or field_name.isdigit():
            raise ConfigError("instruction template must use named fields, not positional ones")
        if format_spec and "{" in format_spec:
            raise ConfigError("instruction template must not nest fields")
        names.add(field_name)

    unknown = names - TEMPLATE_FIELDS
    if unknown:
        raise ConfigError(f"instruction template uses unknown fields: {', '.join(sorted(unknown))}")
    missing = TEMPLATE_FIELDS - names
    if missing:
        raise ConfigError(f"instruction template is missing fields: {', '.join(sorted(missing))}")


class PromptBuilder:
    """Builds CompletionRequest objects from a validated Settings instance."""

    def __init__(self, settings):
        check_template(settings.instruction_template)
        self.system_prompt = settings.system_prompt
        self.template = settings.instruction_template
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature
        self.model = settings.model

    def build(self, language_tag, context_text) -> CompletionRequest:
        user_prompt = self.template.format(language=language_tag, context=context_text)
        return CompletionRequest(
            system_prompt=self.system_prompt,
            user_prompt=user_prompt,
            language_tag=language_tag,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.model,
        )
