from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pygame

logger = logging.getLogger("albiome.render")

DIATOM_VARIANTS = 20
INFUSORIA_VARIANTS = 2
INFUSORIA_FRAME_SIZE = 256


@dataclass
class SpriteBank:
    """Sprite images keyed by what the entities need to draw themselves.

    ``diatoms`` maps an autotroph type to its image; ``infusoria`` maps a
    heterotroph sprite variant (1 or 2) to its animation frames.
    """

    diatoms: Dict[int, pygame.Surface] = field(default_factory=dict)
    infusoria: Dict[int, List[pygame.Surface]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "SpriteBank":
        return cls()

    @classmethod
    def from_directory(cls, root: Path | str) -> "SpriteBank":
        root = Path(root)
        bank = cls()
        for index in range(DIATOM_VARIANTS):
            path = root / "diatom" / f"diatom_v{index + 1}.png"
            if path.is_file():
                bank.diatoms[index] = pygame.image.load(str(path))
        for variant in range(1, INFUSORIA_VARIANTS + 1):
            path = root / "infusoria_frames" / f"infusoria_v{variant}.png"
            if path.is_file():
                bank.infusoria[variant] = _slice_frames(pygame.image.load(str(path)))
        logger.info(
            "Loaded %d diatom sprites and %d infusoria sheets from %s",
            len(bank.diatoms),
            len(bank.infusoria),
            root,
        )
        return bank

    def diatom(self, autotroph_type: int) -> Optional[pygame.Surface]:
        return self.diatoms.get(autotroph_type)

    def infusoria_frame(self, variant: int, frame: int) -> Optional[pygame.Surface]:
        frames = self.infusoria.get(variant)
        if not frames:
            return None
        return frames[frame % len(frames)]


def _slice_frames(sheet: pygame.Surface) -> List[pygame.Surface]:
    width, height = sheet.get_size()
    frame_size = min(INFUSORIA_FRAME_SIZE, width, height)
    count = max(1, width // frame_size)
    return [sheet.subsurface(pygame.Rect(i * frame_size, 0, frame_size, frame_size)).copy() for i in range(count)]
