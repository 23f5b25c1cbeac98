# dispatch/commands.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image

from mapgen.font_cache import FontProvider
from mapgen.renderer import SquareMapImage
from rpgmap.errors import MapError, MapNotFound
from rpgmap.registry import MapRegistry
from rpgmap.square_map import SquareMap
from utils.image_store import ImageStore

logger = logging.getLogger(__name__)

REPLY_MAP_NOT_FOUND = "No map has been created for this channel"
REPLY_NO_CHITS = "(no chits yet)"


@dataclass
class Reply:
    """
    What a command answers with. When `square_map` is set the front end
    should show the rendered map alongside `content`.
    """
    content: str
    square_map: Optional[SquareMap] = None
    image: Optional[Image.Image] = None
    image_path: Optional[Path] = None
    is_usage: bool = False


@dataclass
class CommandContext:
    registry: MapRegistry
    key: str
    image_store: Optional[ImageStore] = None
    prefix: str = "."
    commands: Sequence["Command"] = ()

    def require_map(self) -> SquareMap:
        """The map for this key; raises MapNotFound when none was created."""
        s_map = self.registry.get(self.key)
        if s_map is None:
            raise MapNotFound(self.key)
        return s_map


CommandHandler = Callable[[CommandContext, "Command", str], Reply]


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    handler: CommandHandler
    args_description: str = ""

    def usage(self, prefix: str = ".") -> str:
        if not self.args_description:
            return f"`{prefix}{self.name}`"
        return f"`{prefix}{self.name} {self.args_description}`"


def usage_reply(ctx: CommandContext, cmd: Command) -> Reply:
    return Reply(f"Usage: {cmd.usage(ctx.prefix)}", is_usage=True)


# ----------------------- argument parsing -----------------------
INIT_MAP_RE = re.compile(r"\A(\d+)\s*x\s*(\d+)\Z")
CHIT_AT_RE = re.compile(r'\A"([^"]+)"\s*\((\d+),\s*(\d+)\)\Z')
CHIT_NAME_RE = re.compile(r'\A"([^"]+)"\Z')


def parse_size(args: str) -> Optional[Tuple[int, int]]:
    m = INIT_MAP_RE.match(args.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def parse_chit_at(args: str) -> Optional[Tuple[str, int, int]]:
    """`"name" (x, y)` with 1-based coordinates -> (name, x, y) 0-based."""
    m = CHIT_AT_RE.match(args.strip())
    if not m:
        return None
    return m.group(1), int(m.group(2)) - 1, int(m.group(3)) - 1


def parse_chit_name(args: str) -> Optional[str]:
    m = CHIT_NAME_RE.match(args.strip())
    return m.group(1) if m else None


# --------------------------- handlers ---------------------------
def init_map(ctx: CommandContext, cmd: Command, args: str) -> Reply:
    size = parse_size(args)
    if size is None:
        return usage_reply(ctx, cmd)
    new_map = ctx.registry.initialize(ctx.key, *size)
    return Reply(str(new_map), square_map=new_map)


def clear_map(ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
    if not ctx.registry.clear(ctx.key):
        raise MapNotFound(ctx.key)
    if ctx.image_store is not None:
        ctx.image_store.remove(ctx.key)
    return Reply("Map deleted")


def reply_map_size(ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
    s_map = ctx.require_map()
    return Reply(s_map.size_str())


def list_chits(ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
    s_map = ctx.require_map()
    chits = s_map.chits()
    if not chits:
        return Reply(REPLY_NO_CHITS)
    return Reply("\n".join(str(c) for c in chits))


def add_chit(ctx: CommandContext, cmd: Command, args: str) -> Reply:
    parsed = parse_chit_at(args)
    if parsed is None:
        return usage_reply(ctx, cmd)
    s_map = ctx.require_map()
    name, x, y = parsed
    chit = s_map.add_chit(name, x, y)
    return Reply(str(chit), square_map=s_map)


def delete_chit(ctx: CommandContext, cmd: Command, args: str) -> Reply:
    name = parse_chit_name(args)
    if name is None:
        return usage_reply(ctx, cmd)
    s_map = ctx.require_map()
    s_map.delete_chit(name)
    return Reply(f'Deleted chit "{name}"', square_map=s_map)


def move_chit(ctx: CommandContext, cmd: Command, args: str) -> Reply:
    parsed = parse_chit_at(args)
    if parsed is None:
        return usage_reply(ctx, cmd)
    s_map = ctx.require_map()
    name, x, y = parsed
    chit = s_map.move_chit(name, x, y)
    return Reply(str(chit), square_map=s_map)


def format_help(commands: Sequence[Command], prefix: str = ".") -> str:
    lines: List[str] = []
    for c in commands:
        lines.append(c.usage(prefix))
        lines.append(f"    {c.description}")
    return "\n".join(lines)


def reply_help(ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
    return Reply(format_help(ctx.commands, ctx.prefix))


# ------------------------ command table ------------------------
CHAT_COMMANDS: List[Command] = [
    Command(
        name="init!",
        args_description="width x height",
        description="Create a new map of the given size (replaces the current one!)",
        handler=init_map,
    ),
    Command(
        name="clear!",
        description="Delete the map (careful!)",
        handler=clear_map,
    ),
    Command(
        name="size",
        description="Show the size of the map",
        handler=reply_map_size,
    ),
    Command(
        name="lsc",
        description="List the chits on the map",
        handler=list_chits,
    ),
    Command(
        name="addc",
        args_description='"name" (x, y)',
        description="Add a chit",
        handler=add_chit,
    ),
    Command(
        name="delc",
        args_description='"name"',
        description="Delete a chit",
        handler=delete_chit,
    ),
    Command(
        name="mvc",
        args_description='"name" (x, y)',
        description="Move a chit",
        handler=move_chit,
    ),
    Command(
        name="help",
        description="Show the available commands",
        handler=reply_help,
    ),
]


def build_command_map(commands: Sequence[Command]) -> Dict[str, Command]:
    command_map: Dict[str, Command] = {}
    for c in commands:
        if c.name in command_map:
            raise ValueError(f"duplicate command: {c.name}")
        command_map[c.name] = c
    return command_map


def parse_command(
    text: str, command_map: Dict[str, Command], prefix: str = "."
) -> Optional[Tuple[Command, str]]:
    """
    Split `.name args` into the matching Command and its argument string.
    Returns None when the text isn't one of our commands.
    """
    m = re.match(rf"\A{re.escape(prefix)}([-!a-z]+)(?:\s+(.+))?\Z", text.strip(), re.S)
    if not m:
        return None
    cmd = command_map.get(m.group(1))
    if cmd is None:
        return None
    return cmd, (m.group(2) or "").strip()


class Dispatcher:
    """
    Runs chat commands against a MapRegistry and renders the maps they
    touch. Safe to call from several threads at once.
    """

    def __init__(
        self,
        registry: MapRegistry,
        fonts: FontProvider,
        commands: Sequence[Command] = CHAT_COMMANDS,
        prefix: str = ".",
        image_store: Optional[ImageStore] = None,
        layout: Optional[Dict[str, Any]] = None,
    ):
        self.registry = registry
        self.fonts = fonts
        self.commands = list(commands)
        self.command_map = build_command_map(self.commands)
        self.prefix = prefix
        self.image_store = image_store
        self.layout = layout or {}

    def help_text(self) -> str:
        return format_help(self.commands, self.prefix)

    def execute(self, key: str, text: str) -> Optional[Reply]:
        parsed = parse_command(text, self.command_map, self.prefix)
        if parsed is None:
            return None
        cmd, args = parsed
        logger.info(f"[{key}] {self.prefix}{cmd.name} {args}".rstrip())

        ctx = CommandContext(
            registry=self.registry,
            key=key,
            image_store=self.image_store,
            prefix=self.prefix,
            commands=self.commands,
        )
        try:
            reply = cmd.handler(ctx, cmd, args)
            if reply.square_map is not None:
                self._attach_image(key, reply)
        except MapNotFound:
            logger.info(f"[{key}] {self.prefix}{cmd.name}: no map for this channel")
            return Reply(REPLY_MAP_NOT_FOUND)
        except MapError as e:
            logger.warning(f"[{key}] {self.prefix}{cmd.name} failed: {e}")
            return Reply(f"{self.prefix}{cmd.name}: {e}")
        except OSError as e:
            logger.error(f"[{key}] could not save map image: {e}", exc_info=True)
            return Reply(f"{self.prefix}{cmd.name}: failed to save the map image")
        return reply

    def _attach_image(self, key: str, reply: Reply) -> None:
        image = SquareMapImage(reply.square_map, **self.layout).render(self.fonts)
        reply.image = image
        if self.image_store is not None:
            reply.image_path = self.image_store.save(key, image)
