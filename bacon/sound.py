"""Sound settings: volumes, per-job sound configuration and the sound player."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

_PERCENT_RE = re.compile(r"\+?[0-9]+")
_U16_MAX = 0xFFFF


@dataclass(frozen=True)
class Volume:
    """A volume in percent, always clamped to [0, 100]."""

    percent: int = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "percent", min(max(int(self.percent), 0), 100))

    @classmethod
    def parse(cls, s: str) -> Volume:
        """Parse a volume such as "50" or "50%"; values above 100 are clamped."""
        digits = s.rstrip("%")
        if not _PERCENT_RE.fullmatch(digits) or int(digits) > _U16_MAX:
            raise ValueError("number in 0-100 expected")
        return cls(int(digits))

    def as_percent(self) -> int:
        """Return the volume in [0, 100]."""
        return self.percent

    def as_part(self) -> float:
        """Return the volume in [0, 1]."""
        return self.percent / 100

    def __mul__(self, other: Volume) -> Volume:
        if not isinstance(other, Volume):
            return NotImplemented
        return Volume(self.percent * other.percent // 100)

    def __str__(self) -> str:
        return f"{self.percent}%"


@dataclass
class SoundConfig:
    """Whether sounds are enabled for a job, and at which base volume."""

    enabled: Optional[bool] = None
    base_volume: Optional[Volume] = None

    def apply(self, sc: SoundConfig) -> None:
        """Override the values of this config with the ones set in sc."""
        if sc.enabled is not None:
            self.enabled = sc.enabled
        if sc.base_volume is not None:
            self.base_volume = sc.base_volume

    def is_enabled(self) -> bool:
        return bool(self.enabled)

    def get_base_volume(self) -> Volume:
        return self.base_volume if self.base_volume is not None else Volume()


@dataclass(frozen=True)
class PlaySoundCommand:
    """A request to play a sound, by name (the default sound when None)."""

    name: Optional[str] = None
    volume: Volume = field(default_factory=Volume)


class SoundUnavailableError(RuntimeError):
    """Raised when a sound player is requested but sound can't be played."""


class SoundPlayer:
    """The sound player of a build without audio output: it can't be created."""

    def __init__(self, base_volume: Volume) -> None:
        self.base_volume = base_volume
        raise SoundUnavailableError("sound playback is not available in this build")

    def play(self, sound_command: PlaySoundCommand) -> None:
        """Refuse the command: no audio output exists to play it on."""
        name = sound_command.name or "default"
        raise SoundUnavailableError(
            f"can't play sound {name!r}: sound playback is not available in this build"
        )