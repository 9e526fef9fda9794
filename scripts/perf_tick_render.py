"""
Tick + render performance across grid sizes.

Runs advance() and render_to_string() on populated aquariums of growing
size and reports median/p90 per frame. Log-only above the 200x60 tank.
"""

import gc
import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from asciiquarium.assets import default_asset_table
from asciiquarium.compositor import render_to_string
from asciiquarium.data_types import SimulationConfig
from asciiquarium.simulation import advance
from asciiquarium.spawning import new_aquarium

FRAME_BUDGET_MS = 16.0


def run_frame_perf_test(size, fish_count: int, frames: int = 200) -> dict:
    """
    Time tick + render for one grid size.

    Args:
        size: Grid (width, height)
        fish_count: Lone fish kept alive by population top-up
        frames: Measured frames (after 20 warmup frames)

    Returns:
        Dict with p50, p90, min, max (ms) and final entity count
    """
    assets = default_asset_table()
    config = SimulationConfig(seed=42, fish_count=fish_count, school_count=max(1, fish_count // 8))
    state = new_aquarium(size, assets, config)

    # Warmup
    for _ in range(20):
        state = advance(state, assets, 1.0)
        render_to_string(state, assets)

    # Measure (GC disabled for stable timing)
    gc.collect()
    gc.disable()

    times_ns = []
    try:
        for _ in range(frames):
            start = time.perf_counter_ns()
            state = advance(state, assets, 1.0)
            render_to_string(state, assets)
            times_ns.append(time.perf_counter_ns() - start)
    finally:
        gc.enable()

    times_ms = np.array(times_ns) / 1_000_000
    return {
        'size': size,
        'fish_count': fish_count,
        'p50_ms': np.percentile(times_ms, 50),
        'p90_ms': np.percentile(times_ms, 90),
        'min_ms': np.min(times_ms),
        'max_ms': np.max(times_ms),
        'entities': len(state.entities)
    }


def main():
    """Run frame timing across tank sizes."""
    print("=" * 80)
    print("Tick + Render Performance")
    print("=" * 80)
    print()

    cases = [((80, 24), 4), ((120, 40), 12), ((200, 60), 30), ((400, 120), 120)]
    results = []

    for size, fish_count in cases:
        print(f"[{size[0]}x{size[1]}, {fish_count} fish]")
        result = run_frame_perf_test(size, fish_count)

        print(f"  p50: {result['p50_ms']:.3f}ms")
        print(f"  p90: {result['p90_ms']:.3f}ms")
        print(f"  min: {result['min_ms']:.3f}ms, max: {result['max_ms']:.3f}ms")
        print(f"  Entities: {result['entities']}")

        if size[0] * size[1] <= 200 * 60:
            if result['p50_ms'] >= FRAME_BUDGET_MS:
                print(f"  WARNING: p50 {result['p50_ms']:.3f}ms >= {FRAME_BUDGET_MS}ms frame budget!")
            else:
                headroom_pct = ((FRAME_BUDGET_MS - result['p50_ms']) / FRAME_BUDGET_MS) * 100
                print(f"  PASS: {headroom_pct:.1f}% headroom under {FRAME_BUDGET_MS}ms budget")
        else:
            print("  (log-only, no assertion)")

        results.append(result)
        print()

    print("=" * 80)
    print("| Grid     | Fish | p50 (ms) | p90 (ms) | Entities |")
    print("|----------|------|----------|----------|----------|")
    for r in results:
        grid = f"{r['size'][0]}x{r['size'][1]}"
        print(f"| {grid:8s} | {r['fish_count']:4d} | {r['p50_ms']:8.3f} | {r['p90_ms']:8.3f} | {r['entities']:8d} |")
    print()
    print("=" * 80)


if __name__ == '__main__':
    main()
