"""Shared test helpers for the codecompleter test suite."""

from unittest.mock import MagicMock

import requests

from codecompleter.core.preview import PreviewRenderer


def make_mock_response(
    status_code: int = 200,
    json_data: object | None = None,
    text: str = "",
) -> MagicMock:
    """Create a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {}
    response.text = text
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Server Error",
            response=response,
        )
    else:
        response.raise_for_status.return_value = None
    return response


def chat_response(*contents: str | None) -> dict[str, object]:
    """Body of a chat-completion answer with one choice per content."""
    return {"choices": [{"index": i, "message": {"role": "assistant", "content": c}} for i, c in enumerate(contents)]}


class RecordingRenderer(PreviewRenderer):
    """Renderer that remembers what would be on screen."""

    def __init__(self) -> None:
        self.visible = None
        self.rendered: list[str] = []
        self.clears = 0

    def render(self, preview) -> None:
        assert self.visible is None, "previous preview was not cleared before rendering"
        self.visible = preview
        self.rendered.append(preview.text)

    def clear(self) -> None:
        self.visible = None
        self.clears += 1
