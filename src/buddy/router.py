"""Command routing: one submitted utterance in, one completed response turn out.

Hides whether a turn was answered by the remote model or by the offline
interpreter. Failures never escape this boundary; they become a chat
message instead.
"""

import logging
from pathlib import Path

from .chat import RemoteChatClient
from .config import CONNECTION_ERROR_MESSAGE
from .connectivity import ConnectivityProbe, SocketConnectivityProbe
from .conversation import Conversation, Draft
from .models import Attachment, Message, SystemAction
from .offline import OfflineInterpreter
from .telemetry import ActionLog

logger = logging.getLogger(__name__)


class RouterCallback:
    """Receives conversation updates from the router.

    All hooks are no-ops; subclasses override the ones they render.
    """

    def message_added(self, message: Message) -> None:
        pass

    def message_updated(self, message: Message) -> None:
        pass

    def action_recorded(self, action: SystemAction) -> None:
        pass

    def loading_changed(self, loading: bool) -> None:
        pass

    def draft_changed(self, draft: Draft) -> None:
        pass

    def conversation_reset(self) -> None:
        pass


class CommandRouter:
    """Routes submissions to the remote model or the offline interpreter.

    Without a chat client every turn is answered offline. Only one turn
    is in flight at a time; submissions made meanwhile are ignored.
    """

    def __init__(
        self,
        chat_client: RemoteChatClient | None,
        offline: OfflineInterpreter | None = None,
        connectivity: ConnectivityProbe | None = None,
        action_log: ActionLog | None = None,
        draft: Draft | None = None,
        callback: RouterCallback | None = None,
    ) -> None:
        self._chat = chat_client
        self._offline = offline or OfflineInterpreter()
        self._connectivity = connectivity or SocketConnectivityProbe()
        self._action_log = action_log if action_log is not None else ActionLog()
        self._draft = draft if draft is not None else Draft()
        self._callback = callback or RouterCallback()
        self._conversation = Conversation()
        self._in_flight = False

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def messages(self) -> list[Message]:
        return self._conversation.messages

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def model(self) -> str:
        return self._chat.model if self._chat is not None else "offline"

    @property
    def action_log(self) -> ActionLog:
        return self._action_log

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    @property
    def callback(self) -> RouterCallback:
        return self._callback

    @callback.setter
    def callback(self, callback: RouterCallback | None) -> None:
        self._callback = callback or RouterCallback()

    def attach(self, attachment: Attachment) -> None:
        """Add an attachment to the pending input."""
        self._draft.attachments.append(attachment)
        self._callback.draft_changed(self._draft)

    def attach_image(self, path: str | Path) -> Attachment:
        """Load an image file and add it to the pending input.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not an image
        """
        attachment = Attachment.from_path(path)
        self.attach(attachment)
        return attachment

    def remove_attachment(self, index: int) -> None:
        """Drop one pending attachment; out-of-range indexes are ignored."""
        if 0 <= index < len(self._draft.attachments):
            del self._draft.attachments[index]
            self._callback.draft_changed(self._draft)

    def reset_conversation(self) -> None:
        """Clear all turns and start a fresh remote session on the next send."""
        self._conversation.clear()
        if self._chat is not None:
            self._chat.reset()
        self._callback.conversation_reset()

    async def is_online(self) -> bool:
        return await self._connectivity.is_online()

    def _set_loading(self, loading: bool) -> None:
        self._in_flight = loading
        self._callback.loading_changed(loading)

    async def submit(self, text: str | None = None) -> Message | None:
        """Submit a turn and wait until its response is complete.

        Args:
            text: Text to send; defaults to the pending draft text.
                Pending attachments are always taken from the draft.

        Returns:
            The completed response turn, or None when the submission was
            rejected (nothing to send, or a turn already in flight).
        """
        text_to_send = self._draft.text if text is None else text
        if self._in_flight or Draft(text_to_send, self._draft.attachments).is_empty():
            return None

        user_text = text_to_send.strip()
        attachments = list(self._draft.attachments)

        # Cleared before the response arrives so a new draft can be composed
        self._draft.clear()
        self._callback.draft_changed(self._draft)

        user_message = self._conversation.add_user_turn(user_text, attachments)
        self._callback.message_added(user_message)
        placeholder = self._conversation.add_placeholder()
        self._callback.message_added(placeholder)
        self._set_loading(True)

        def on_action(action: SystemAction) -> None:
            placeholder.tool_invocations.append(action)
            self._action_log.record(action)
            self._callback.action_recorded(action)

        try:
            if self._chat is not None and await self._connectivity.is_online():
                logger.info("Routing turn to %s", self._chat.model)
                stream = self._chat.send_message(user_text, attachments, on_action)
                full_text = ""
                async for fragment in stream:
                    full_text += fragment
                    placeholder.text = full_text
                    self._callback.message_updated(placeholder)
                if stream.usage:
                    logger.debug("Token usage: %s", stream.usage)
            else:
                logger.info("Offline; routing turn to local interpreter")
                placeholder.text = await self._offline.process(user_text, on_action)
            placeholder.is_streaming = False
        except Exception:
            logger.exception("Failed to produce a response")
            placeholder.text = CONNECTION_ERROR_MESSAGE
            placeholder.is_streaming = False
        finally:
            self._set_loading(False)

        self._callback.message_updated(placeholder)
        return placeholder
