from __future__ import annotations

import argparse

import uvicorn

from referral_api.core.config import Settings


def main(argv: list[str] | None = None) -> None:
    settings = Settings()

    parser = argparse.ArgumentParser(prog="referral_api")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    uvicorn.run("referral_api.main:app", host=args.host, port=int(args.port))


if __name__ == "__main__":
    main()
