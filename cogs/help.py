# cogs/help.py
from typing import Optional, Sequence

import discord
from discord import app_commands
from discord.ext import commands

from dispatch.commands import CHAT_COMMANDS, Command

HELP_CATEGORIES = [
    ("Quickstart", "quickstart"),
    ("Commands", "commands"),
    ("All", "all"),
]


def build_quickstart_embed(guild: Optional[discord.Guild], prefix: str = ".") -> discord.Embed:
    e = discord.Embed(
        title="Map Bot — Quickstart",
        description=(
            "Every channel gets its own square map. Coordinates start at **1**.\n\n"
            f"1) Create a map: `{prefix}init! 10 x 10`\n"
            f"2) Put a chit on it: `{prefix}addc \"hero\" (1, 1)`\n"
            f"3) Move it: `{prefix}mvc \"hero\" (3, 4)`\n"
            f"4) See who's where: `{prefix}lsc`\n\n"
            "The bot answers each change with a fresh picture of the map and a legend."
        ),
        color=discord.Color.blurple()
    )
    if guild:
        e.set_footer(text=f"Server: {guild.name}")
    return e


def build_commands_embed(cmds: Sequence[Command], prefix: str = ".") -> discord.Embed:
    e = discord.Embed(
        title="Map Commands",
        color=discord.Color.green()
    )
    for c in cmds:
        e.add_field(name=c.usage(prefix), value=c.description, inline=False)
    return e


class HelpCog(commands.Cog):
    """Slash-command help for the map commands."""

    def __init__(self, bot: commands.Bot, cmds: Sequence[Command] = CHAT_COMMANDS, prefix: str = "."):
        self.bot = bot
        self.cmds = cmds
        self.prefix = prefix

    @app_commands.command(name="maphelp", description="Show how to use the map commands.")
    @app_commands.describe(category="Pick a specific section (optional).")
    @app_commands.choices(category=[
        app_commands.Choice(name=label, value=value) for label, value in HELP_CATEGORIES
    ])
    async def maphelp(self, interaction: discord.Interaction, category: Optional[app_commands.Choice[str]] = None):
        value = category.value if category else "all"
        if value == "quickstart":
            embeds = [build_quickstart_embed(interaction.guild, self.prefix)]
        elif value == "commands":
            embeds = [build_commands_embed(self.cmds, self.prefix)]
        else:
            embeds = [
                build_quickstart_embed(interaction.guild, self.prefix),
                build_commands_embed(self.cmds, self.prefix),
            ]
        await interaction.response.send_message(embeds=embeds, ephemeral=True)


async def setup(bot: commands.Bot):
    dispatcher = getattr(bot, "map_dispatcher", None)
    if dispatcher is None:
        await bot.add_cog(HelpCog(bot))
        return
    await bot.add_cog(HelpCog(bot, dispatcher.commands, dispatcher.prefix))
