from __future__ import annotations
import argparse, logging, sys, termios
from . import config as CFG
from .config import Settings
from .engine import get_completion
from .shell import complete_line

log = logging.getLogger("completers")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="completers",
        description="Extensible interactive completion for *nix shells",
    )
    parser.add_argument("line", metavar="CURRENT_LINE", help="The current input line")
    parser.add_argument("-p", "--point", type=int, required=True,
                        help="Current position of the input point within CURRENT_LINE")
    parser.add_argument("--debug", action="store_true", help="Log debug information to --log")
    parser.add_argument("--log", default=CFG.LOG_PATH, help="Log file (default: %(default)s)")
    parser.add_argument("--height", type=int, default=CFG.CHOOSER_HEIGHT, help="Rows in the chooser")
    args = parser.parse_args(argv)

    logging.basicConfig(
        filename=args.log,
        filemode="w",
        level=logging.DEBUG if (args.debug or CFG.DEBUG) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(page_height=args.height)
    point = max(0, min(args.point, len(args.line)))
    try:
        line, point = complete_line(
            args.line, point,
            lambda query, completers: get_completion(query, completers, settings),
            boundaries=settings.word_boundaries,
        )
    except (OSError, termios.error) as e:
        log.error("session failed: %s", e)
        print(e, file=sys.stderr)
        return 1

    # the shell binding reads "<point> <line>" back from stderr
    print(f"{point} {line}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
