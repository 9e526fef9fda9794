"""
Deterministic RNG utilities for the asciiquarium simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world seed, stream name). All randomness uses
numpy.random.Generator(PCG64) for reproducible cross-session results.
The generator lives inside AquariumState, so copying the state copies the
stream position with it.
"""

import hashlib
import numpy as np
from typing import Any


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Uses SHA256 to hash components into stable seed value.

    Args:
        *components: Seed components (world seed, stream name, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        seed = make_seed(12345, "asciiquarium")
    """
    # Join all components with colon separator
    hash_input = ":".join(str(c) for c in components)

    # SHA256 hash and extract 64-bit integer
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


class SimRng:
    """
    Seeded random stream carried in simulation state.

    Thin wrapper around numpy.random.Generator(PCG64) returning plain
    Python scalars, with a draw counter for telemetry.
    """

    def __init__(self, seed: int, stream: str = "asciiquarium"):
        self.seed = seed
        self.stream = stream
        self._gen = np.random.Generator(np.random.PCG64(make_seed(seed, stream)))
        self.draws = 0

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)"""
        self.draws += 1
        if high <= low:
            # Degenerate range still consumes a draw to keep the stream aligned
            self._gen.random()
            return float(low)
        return float(self._gen.uniform(low, high))

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high] (inclusive)"""
        self.draws += 1
        if high <= low:
            self._gen.random()
            return int(low)
        return int(self._gen.integers(low, high, endpoint=True))

    def choice(self, n: int) -> int:
        """Uniform index in [0, n)"""
        return self.integers(0, max(n, 1) - 1)

    def coin(self) -> bool:
        """Fair coin flip"""
        return self.integers(0, 1) == 1

    def get_state(self) -> dict:
        """Serializable generator state"""
        return {
            'seed': self.seed,
            'stream': self.stream,
            'draws': self.draws,
            'bit_generator': self._gen.bit_generator.state,
        }

    def set_state(self, state: dict):
        """Restore generator state produced by get_state()"""
        self.seed = state['seed']
        self.stream = state['stream']
        self.draws = state['draws']
        self._gen.bit_generator.state = state['bit_generator']
