"""Deterministic RNG container with named independent streams."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field


def draw_seed() -> int:
    """Fresh 32-bit seed from OS entropy, for runs started without one."""
    return random.SystemRandom().randrange(2**32)


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state."""

    seed: int
    _streams: dict[str, random.Random] = field(default_factory=dict, init=False, repr=False)

    def stream(self, name: str) -> random.Random:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            # Use stable cross-process seed derivation instead of built-in hash().
            digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
            derived_seed = int.from_bytes(digest[:8], byteorder="big", signed=False) & 0xFFFFFFFF
            self._streams[name] = random.Random(derived_seed)
        return self._streams[name]

    def child_rngs(self, name: str, count: int) -> list[random.Random]:
        """``count`` generators seeded in order from stream ``name``.

        Seeds are drawn before any work is dispatched, so results do not depend
        on which worker ends up consuming which generator.
        """
        source = self.stream(name)
        return [random.Random(source.getrandbits(64)) for _ in range(count)]
