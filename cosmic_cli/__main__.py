"""``python -m cosmic_cli`` and console script entrypoint."""

from __future__ import annotations


def main() -> int:
    from .main import main as cli_main

    return cli_main()


if __name__ == "__main__":
    raise SystemExit(main())
