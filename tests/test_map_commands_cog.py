import asyncio
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List

import discord

from cogs.map_commands import MapCommands, _send_kwargs
from dispatch.commands import Dispatcher, Reply
from rpgmap.registry import MapRegistry
from utils.image_store import ImageStore


class FakeChannel:
    def __init__(self, channel_id: int):
        self.id = channel_id
        self.sent: List[Dict[str, Any]] = []

    async def send(self, **kwargs):
        self.sent.append(kwargs)


def _message(content: str, channel: FakeChannel, bot: bool = False, author_id: int = 1):
    return SimpleNamespace(
        content=content,
        channel=channel,
        author=SimpleNamespace(bot=bot, id=author_id),
    )


def _cog(registry: MapRegistry, fonts, tmp_path: Path) -> MapCommands:
    bot = SimpleNamespace(user=SimpleNamespace(id=999))
    dispatcher = Dispatcher(registry, fonts, image_store=ImageStore(str(tmp_path)))
    return MapCommands(bot, dispatcher)


def test_send_kwargs_text_only() -> None:
    assert _send_kwargs("1", Reply("10 x 10")) == {"content": "10 x 10"}


def test_on_message_sends_map_image(registry: MapRegistry, fonts, tmp_path: Path) -> None:
    cog = _cog(registry, fonts, tmp_path)
    channel = FakeChannel(42)

    asyncio.run(cog.on_message(_message(".init! 3 x 3", channel)))

    assert registry.get("42") is not None
    assert len(channel.sent) == 1
    sent = channel.sent[0]
    assert sent["content"] == "SquareMap (3 x 3)"
    assert isinstance(sent["file"], discord.File)
    assert sent["file"].filename == "42.png"


def test_on_message_ignores_bots_and_chatter(registry: MapRegistry, fonts, tmp_path: Path) -> None:
    cog = _cog(registry, fonts, tmp_path)
    channel = FakeChannel(42)

    asyncio.run(cog.on_message(_message(".init! 3 x 3", channel, bot=True)))
    asyncio.run(cog.on_message(_message(".init! 3 x 3", channel, author_id=999)))
    asyncio.run(cog.on_message(_message("just talking", channel)))

    assert channel.sent == []
    assert registry.get("42") is None


def test_image_is_sent_from_memory_after_clear(registry: MapRegistry, fonts, tmp_path: Path) -> None:
    store = ImageStore(str(tmp_path))
    dispatcher = Dispatcher(registry, fonts, image_store=store)
    reply = dispatcher.execute("42", ".init! 3 x 3")
    # another worker clears the channel before the reply goes out
    dispatcher.execute("42", ".clear!")
    assert not store.path_for("42").exists()

    kwargs = _send_kwargs("42", reply)
    assert kwargs["content"] == "SquareMap (3 x 3)"
    assert kwargs["file"].filename == "42.png"
    assert kwargs["file"].fp.read(8) == b"\x89PNG\r\n\x1a\n"
