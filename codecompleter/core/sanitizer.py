"""
sanitizer.py

Strips code fences and prompt-format control tokens that some models echo back.
Whitespace is left exactly as the model produced it, since the result is
inserted verbatim into source code.
"""

import re

# Instruction/system delimiters of the Llama-2, ChatML and Llama-3 formats.
DELIMITER_TOKENS = (
    "[INST]",
    "[/INST]",
    "<<SYS>>",
    "<</SYS>>",
    "<s>",
    "</s>",
    "<|im_start|>",
    "<|im_end|>",
    "<|endoftext|>",
    "<|eot_id|>",
)

# An opening fence may carry an info string such as ```python or ```c++; it only
# counts as one when the fence ends its line, otherwise the text after the
# backticks is code and stays.
_FENCE = r"```[\w+#.-]*(?=\n|\Z)|```"

_ARTIFACT_RE = re.compile(
    "|".join([_FENCE] + [re.escape(token) for token in DELIMITER_TOKENS])
)


def sanitize(raw_text):
    """
    Remove fence markers and delimiter tokens from `raw_text`.

    Removing one marker can glue two fragments into a new one ("``" + "[INST]" + "`"),
    so substitution repeats until nothing matches.
    """
    text = raw_text or ""
    while True:
        cleaned = _ARTIFACT_RE.sub("", text)
        if cleaned == text:
            return cleaned
        text = cleaned
