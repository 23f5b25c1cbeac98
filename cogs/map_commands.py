# cogs/map_commands.py
from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from dispatch.commands import Dispatcher, Reply
from utils.image_store import to_png_bytes

logger = logging.getLogger(__name__)


class MapCommands(commands.Cog):
    """
    Text commands (`.init! 10 x 10`, `.addc "hero" (1, 2)`, ...) keyed by
    the channel they're sent in.
    """

    def __init__(self, bot: commands.Bot, dispatcher: Dispatcher):
        self.bot = bot
        self.dispatcher = dispatcher

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        # ignore ourselves and other bots
        if message.author.bot or (self.bot.user and message.author.id == self.bot.user.id):
            return

        key = str(message.channel.id)
        # Rendering is CPU-bound; keep it off the event loop
        reply = await asyncio.to_thread(self.dispatcher.execute, key, message.content)
        if reply is None:
            return

        await message.channel.send(**_send_kwargs(key, reply))


def _send_kwargs(key: str, reply: Reply) -> dict:
    kwargs = {"content": reply.content}
    # Send the in-memory render; the stored file may already be replaced or removed
    if reply.image is not None:
        kwargs["file"] = discord.File(to_png_bytes(reply.image), filename=f"{key}.png")
    return kwargs


async def setup(bot: commands.Bot):
    dispatcher = getattr(bot, "map_dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("bot has no map_dispatcher; construct it with bot.MapBot")
    await bot.add_cog(MapCommands(bot, dispatcher))
