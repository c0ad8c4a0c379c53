from __future__ import annotations

from .editor import run


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
