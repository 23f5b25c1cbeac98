# bot.py
import asyncio
import logging
import os
import sys
from typing import Any, Dict, Optional

import discord
from discord.ext import commands

from dispatch.commands import CHAT_COMMANDS, Dispatcher
from mapgen.font_cache import FontCache
from rpgmap.registry import MapRegistry
from utils.image_store import ImageStore
from utils.settings import layout_from_settings, load_settings, validate_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EXTENSIONS = (
    "cogs.map_commands",
    "cogs.help",
)


class MapBot(commands.Bot):
    """
    Composition root: owns the map registry, the loaded font and the image
    store, and hands them to the cogs through `map_dispatcher`.
    """

    def __init__(self, settings: Dict[str, Any], fonts: FontCache, registry: Optional[MapRegistry] = None):
        intents = discord.Intents.default()
        intents.message_content = True  # text commands are read from messages
        super().__init__(command_prefix="!", intents=intents, help_command=None)

        self.settings = settings
        self.registry = registry or MapRegistry()
        self.fonts = fonts
        self.image_store = ImageStore(settings["image_dir"])
        self.map_dispatcher = Dispatcher(
            self.registry,
            fonts,
            commands=CHAT_COMMANDS,
            prefix=settings["command_prefix"],
            image_store=self.image_store,
            layout=layout_from_settings(settings),
        )

    async def setup_hook(self):
        for ext in EXTENSIONS:
            await self.load_extension(ext)

    async def on_ready(self):
        logger.info(f"Logged in as {self.user} ({self.user.id})")
        try:
            synced = await self.tree.sync()
            logger.info(f"Synced {len(synced)} command(s).")
        except discord.HTTPException as e:
            logger.error(f"Slash sync failed: {e}")


def build_bot(settings: Dict[str, Any]) -> MapBot:
    validate_settings(settings)
    fonts = FontCache()
    fonts.store_font_data_from_file(settings["font_path"])
    return MapBot(settings, fonts)


async def main():
    settings = load_settings()
    try:
        bot = build_bot(settings)
    except (ValueError, OSError) as e:
        logger.error(f"Failed to start: {e}")
        sys.exit(1)

    async with bot:
        await bot.start(os.environ["DISCORD_TOKEN"])


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
