"""python -m pagebot [--config PATH]"""

import argparse
import asyncio
from pathlib import Path

from pagebot.config.loader import load_config
from pagebot.gateway import Gateway


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pagebot", description="Facebook Page Messenger bot")
    parser.add_argument("--config", type=Path, default=None, help="path to config.json")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    asyncio.run(Gateway(config).run())


if __name__ == "__main__":
    main()
