"""Command line entry point: submit one generation job and wait for the asset URL."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from shipin import (
    AspectRatio,
    GenerationRequest,
    ImageReference,
    ShipinClient,
    ShipinError,
    VideoDuration,
)
from shipin.logging import configure_logging


def build_request(args: argparse.Namespace) -> GenerationRequest:
    image: ImageReference | None = None
    if args.image_url:
        image = ImageReference.from_url(args.image_url)
    elif args.image_file:
        image = ImageReference.from_bytes(Path(args.image_file).read_bytes())
    return GenerationRequest(
        prompt=args.prompt,
        image=image,
        duration=VideoDuration(args.duration),
        aspect_ratio=AspectRatio(args.ratio),
        watermark=args.watermark,
        seed=args.seed,
        loop=args.loop,
    )


async def run(args: argparse.Namespace) -> str:
    request = build_request(args)
    async with ShipinClient.for_provider(args.provider) as client:
        outcome = await client.generate(
            request,
            on_status=lambda status: print(client.describe_status(status), file=sys.stderr),
        )
    return outcome.asset_url


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a video and print its URL.")
    parser.add_argument("--provider", choices=("runway", "luma"), default="runway")
    parser.add_argument("--prompt", required=True)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--image-url", help="Remote prompt image URL.")
    source.add_argument("--image-file", help="Local prompt image, sent inline as JPEG.")
    parser.add_argument("--duration", type=int, choices=[d.value for d in VideoDuration], default=5)
    parser.add_argument("--ratio", choices=[r.value for r in AspectRatio], default="16:9")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--watermark", action="store_true")
    parser.add_argument("--loop", action="store_true", help="Loop the clip (luma only).")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    if args.verbose:
        configure_logging()
    try:
        url = asyncio.run(run(args))
    except ShipinError as exc:
        print(f"generation failed: {exc.message}", file=sys.stderr)
        return 2

    print(url, file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
