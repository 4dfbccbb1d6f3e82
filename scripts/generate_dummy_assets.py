#!/usr/bin/env python3
"""Generate placeholder biome sprites (diatoms + infusoria frame sheets)."""
from __future__ import annotations

import argparse
import struct
import zlib
from pathlib import Path

DIATOM_VARIANTS = 20
INFUSORIA_VARIANTS = 2
INFUSORIA_FRAMES = 8


def build_png(width: int, height: int, color: tuple[int, int, int, int]) -> bytes:
    r, g, b, a = color
    row = bytes([r, g, b, a]) * width
    raw = b"".join(b"\x00" + row for _ in range(height))
    compressed = zlib.compress(raw)

    def chunk(chunk_type: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + chunk_type
            + data
            + struct.pack(">I", zlib.crc32(chunk_type + data) & 0xFFFFFFFF)
        )

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", compressed) + chunk(
        b"IEND", b""
    )


def write_asset(path: Path, data: bytes, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(f"{path} already exists. Use --overwrite to replace.")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate placeholder biome sprites (diatoms + infusoria sheets)."
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("assets"),
        help="Directory to write assets into.",
    )
    parser.add_argument(
        "--frame-size",
        type=int,
        default=16,
        help="Edge length in pixels of every generated sprite frame.",
    )
    parser.add_argument(
        "--overwrite", action="store_true", help="Overwrite existing files."
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output_dir: Path = args.output_dir
    size: int = args.frame_size
    output_dir.mkdir(parents=True, exist_ok=True)

    for index in range(DIATOM_VARIANTS):
        shade = 60 + index * 9
        color = (40, shade, 40, 220) if index < 10 else (shade, 40, 30, 220)
        write_asset(output_dir / "diatom" / f"diatom_v{index + 1}.png", build_png(size, size, color), args.overwrite)
    for variant in range(1, INFUSORIA_VARIANTS + 1):
        color = (230, 230, 200, 200) if variant == 1 else (200, 220, 240, 200)
        sheet = build_png(size * INFUSORIA_FRAMES, size, color)
        write_asset(output_dir / "infusoria_frames" / f"infusoria_v{variant}.png", sheet, args.overwrite)

    print(f"Generated dummy assets in {output_dir}")


if __name__ == "__main__":
    main()
