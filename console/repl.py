# console/repl.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, List, Optional

from dispatch.commands import (
    Command,
    CommandContext,
    Reply,
    add_chit,
    build_command_map,
    delete_chit,
    format_help,
    init_map,
    list_chits,
    move_chit,
    parse_command,
    reply_map_size,
)
from mapgen.font_cache import FontCache, FontProvider
from mapgen.renderer import SquareMapImage
from rpgmap.errors import MapError
from rpgmap.registry import MapRegistry
from utils.config import REPL_INITIAL_SIZE
from utils.settings import layout_from_settings, load_settings, validate_settings

logger = logging.getLogger(__name__)

PROMPT = ">> "
RESULT_HEADER = "=> "
REPL_KEY = "repl"
DEFAULT_PNG_FILENAME = "map.png"


class REPL:
    """
    Line-oriented console for one map. Reads commands from `in_stream` and
    writes results to `out`; handy for trying the renderer without Discord.
    """

    def __init__(
        self,
        in_stream: IO[str],
        out: IO[str],
        fonts: FontProvider,
        layout: Optional[dict] = None,
    ):
        self.in_stream = in_stream
        self.out = out
        self.fonts = fonts
        self.layout = layout or {}
        self.terminated = False

        self.registry = MapRegistry()
        self.registry.initialize(REPL_KEY, *REPL_INITIAL_SIZE)

        self.commands: List[Command] = [
            Command("init", "Create a new map of the given size", init_map, "width x height"),
            Command("size", "Print the size of the map", reply_map_size),
            Command("png", "Save the map as a PNG file", self._save_map_as_png, "[filename]"),
            Command("lsc", "List the chits", list_chits),
            Command("addc", "Add a chit", add_chit, '"name" (x, y)'),
            Command("delc", "Delete a chit", delete_chit, '"name"'),
            Command("mvc", "Move a chit", move_chit, '"name" (x, y)'),
            Command("help", "Show the available commands", self._print_help),
            Command("quit", "Leave the REPL", self._terminate),
            Command("q", "Leave the REPL", self._terminate),
        ]
        self.command_map = build_command_map(self.commands)

    # ---------------------------- output ----------------------------
    def _println(self, s: str = "") -> None:
        self.out.write(s + "\n")

    def print_welcome_message(self) -> None:
        self._println("mapbot REPL")
        self._println()
        self._println('* type "help" to list the available commands')
        self._println('* type "q" or "quit" to leave')
        self._println()

    # --------------------------- commands ---------------------------
    def _save_map_as_png(self, ctx: CommandContext, _cmd: Command, args: str) -> Reply:
        filename = args or DEFAULT_PNG_FILENAME
        img = SquareMapImage(ctx.require_map(), **self.layout).render(self.fonts)
        img.save(Path(filename), format="PNG")
        return Reply(filename)

    def _print_help(self, _ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
        return Reply(format_help(self.commands, prefix=""))

    def _terminate(self, _ctx: CommandContext, _cmd: Command, _args: str) -> Reply:
        self.terminated = True
        return Reply("")

    # ----------------------------- loop -----------------------------
    def execute(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        parsed = parse_command(line, self.command_map, prefix="")
        if parsed is None:
            self._println(f"unknown command: {line.split()[0]}")
            return
        cmd, args = parsed

        ctx = CommandContext(registry=self.registry, key=REPL_KEY, prefix="", commands=self.commands)
        try:
            reply = cmd.handler(ctx, cmd, args)
        except (MapError, OSError) as e:
            self._println(str(e))
            return

        if self.terminated:
            return
        if reply.is_usage:
            self._println(reply.content)
        elif cmd.name in ("init", "delc"):
            self._println("OK")
        elif cmd.name in ("help", "lsc"):
            self._println(reply.content)
        else:
            self._println(RESULT_HEADER + reply.content)

    def start(self) -> None:
        self.print_welcome_message()
        while not self.terminated:
            self.out.write(PROMPT)
            self.out.flush()
            line = self.in_stream.readline()
            if not line:
                # EOF (^D)
                self._println()
                break
            self.execute(line)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = load_settings()
    try:
        validate_settings(settings)
        fonts = FontCache()
        fonts.store_font_data_from_file(settings["font_path"])
    except (ValueError, OSError) as e:
        logger.error(f"Failed to load config: {e}")
        sys.exit(1)

    REPL(sys.stdin, sys.stdout, fonts, layout_from_settings(settings)).start()


if __name__ == "__main__":
    main()
