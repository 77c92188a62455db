import logging
import threading

from . import context
from .errors import CompleterError, EmptyResponse, StaleAnchor
from .llm_client import LLMClient
from .preview import Anchor, PreviewController
from .prompt import PromptBuilder
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation flag shared between a trigger and its worker thread."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()


class CompletionSession:
    """
    The editor-agnostic completion lifecycle for one editing session.

    A host (hooking/qt_editor.py, or the headless CLI) owns one session per
    document and maps its three commands onto `complete()`/`complete_async()`,
    `accept()` and `discard()`. Nothing here raises into the host: failures are
    logged and leave the preview untouched.
    """

    def __init__(self, document, settings, llm_client=None, renderer=None):
        """
        :param document:   The buffer (core.document.Document shape).
        :param settings:   A validated config.settings.Settings.
        :param llm_client: An LLMClient; built from settings when omitted.
        :param renderer:   PreviewRenderer used to draw the preview.
        """
        self.document = document
        self.settings = settings
        self.llm_client = llm_client or LLMClient.from_settings(settings)
        self.prompt_builder = PromptBuilder(settings)
        self.preview = PreviewController(document, renderer)

        # Token of the request currently in flight, if any (cancel-and-replace).
        self._pending = None
        self._lock = threading.Lock()

    # ---------------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------------

    def complete(self):
        """
        Run a completion synchronously and show it.

        :return: The shown Preview, or None if no completion was produced.
        """
        with self._lock:
            self._cancel_pending_locked()
        anchor, request = self._prepare()
        text = self._infer(request)
        if text is None:
            return None
        with self._lock:
            return self.preview.show(anchor, text)

    def complete_async(self, dispatch=None):
        """
        Run a completion on a background thread.

        Context and anchor are captured on the calling thread; only the HTTP
        exchange and sanitizing happen on the worker. The result is handed to
        `dispatch(callable)` so a UI host can run it on its own thread; without
        one it runs directly on the worker.

        Any earlier request still in flight is cancelled and its result dropped.

        :return: The CancellationToken of the new request.
        """
        token = CancellationToken()
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = token

        anchor, request = self._prepare()

        def run_llm():
            text = self._infer(request)
            if text is None or token.cancelled:
                return
            (dispatch or _call_now)(lambda: self._present(token, anchor, text))

        thread = threading.Thread(target=run_llm, name="codecompleter-inference", daemon=True)
        thread.start()
        return token

    def accept(self):
        with self._lock:
            self._cancel_pending_locked()
            return self.preview.accept()

    def discard(self):
        with self._lock:
            self._cancel_pending_locked()
            return self.preview.discard()

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------

    def _prepare(self):
        extracted = context.extract(self.document, self.settings.context_limit)
        anchor = Anchor.at_cursor(self.document)
        request = self.prompt_builder.build(extracted.language_tag, extracted.text)
        logger.debug(
            "Requesting completion at %d (%d chars of %s context)",
            anchor.position, len(extracted.text), extracted.language_tag or "untagged",
        )
        return anchor, request

    def _infer(self, request):
        """Return sanitized completion text, or None after logging why there is none."""
        try:
            response = self.llm_client.call(request)
            text = sanitize(response.raw_text)
            if not text.strip():
                raise EmptyResponse("no completion produced", detail=f"raw response {response.raw_text!r}")
            return text
        except EmptyResponse as e:
            logger.info("%s", e)
        except CompleterError as e:
            logger.error("Completion failed: %s", e)
        return None

    def _present(self, token, anchor, text):
        # Held until the preview is shown, so a concurrent accept/discard either
        # cancels this request first or tears down what it showed.
        with self._lock:
            if token.cancelled:
                logger.debug("Dropping completion for a cancelled request")
                return
            if self._pending is token:
                self._pending = None
            try:
                anchor.check(self.document)
            except StaleAnchor as e:
                logger.info("Dropping completion, buffer changed while waiting: %s", e)
                return
            self.preview.show(anchor, text)

    def _cancel_pending_locked(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


def _call_now(fn):
    fn()
