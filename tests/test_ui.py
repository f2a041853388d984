"""Headless tests for the terminal UI."""
import pytest

from buddy.connectivity import StaticConnectivityProbe
from buddy.models import Attachment, ListeningState
from buddy.offline import OfflineInterpreter
from buddy.router import CommandRouter
from buddy.ui import BuddyApp
from buddy.ui.widgets import AttachmentStrip, ChatHistoryWidget, ChatInputBar, DebugPanel


def offline_router() -> CommandRouter:
    return CommandRouter(
        None,
        offline=OfflineInterpreter(delay=0),
        connectivity=StaticConnectivityProbe(False),
    )


@pytest.mark.asyncio
async def test_submitted_turn_is_rendered():
    """Test that a submitted command shows both turns and logs the action."""
    app = BuddyApp(offline_router())

    async with app.run_test() as pilot:
        bar = app.query_one("#chat-input-bar", ChatInputBar)
        bar.post_message(ChatInputBar.Submitted("mute"))
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        chat = app.query_one("#chat-history", ChatHistoryWidget)
        assert chat.message_count == 2
        assert chat.get_last_response() == "System muted."
        assert len(app.router.action_log) == 1


@pytest.mark.asyncio
async def test_reset_clears_history():
    """Test that the reset binding empties the chat."""
    app = BuddyApp(offline_router())

    async with app.run_test() as pilot:
        await app.router.submit("restart")
        await pilot.pause()

        await pilot.press("ctrl+k")
        await pilot.pause()

        assert app.query_one("#chat-history", ChatHistoryWidget).message_count == 0
        assert app.router.messages == []


@pytest.mark.asyncio
async def test_mic_toggle(fake_engine):
    """Test that the mic binding switches to standby and back."""
    app = BuddyApp(offline_router(), engine=fake_engine)

    async with app.run_test() as pilot:
        await pilot.press("ctrl+t")
        assert app.controller.state == ListeningState.STANDBY
        assert fake_engine.running

        await pilot.press("ctrl+t")
        assert app.controller.state == ListeningState.OFF


@pytest.mark.asyncio
async def test_debug_panel_toggle():
    """Test that the log panel starts hidden and can be shown."""
    app = BuddyApp(offline_router())

    async with app.run_test() as pilot:
        panel = app.query_one("#debug-panel", DebugPanel)
        assert not panel.display

        await pilot.press("ctrl+d")

        assert panel.display


@pytest.mark.asyncio
async def test_remove_attachment_by_index():
    """Test that any attachment can be removed, not only the last one."""
    app = BuddyApp(offline_router())

    async with app.run_test() as pilot:
        app.router.attach(Attachment.from_bytes(b"a", "image/png"))
        app.router.attach(Attachment.from_bytes(b"b", "image/jpeg"))
        await pilot.pause()

        await app.run_action("remove_attachment(0)")
        await pilot.pause()

        assert [a.mime_type for a in app.router.draft.attachments] == ["image/jpeg"]
        strip = app.query_one("#attachments", AttachmentStrip)
        assert strip.display

        await pilot.press("ctrl+x")
        await pilot.pause()

        assert app.router.draft.attachments == []
        assert not strip.display
