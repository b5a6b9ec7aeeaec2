#!/usr/bin/env python3
"""
Sample random worlds and check the generation invariants.

- Generates N worlds (default 10000) of the given size and pit count.
- Checks:
  * exactly one predator, at most one gold, at most `pits` pits
  * no feature on the start cell [1,1]
  * no two features share a cell
- Prints a JSON summary with counts, per-cell hit frequencies and anomaly samples

Usage:
  python tools/validate_worlds.py                # 10000 worlds, 4x4, 3 pits
  python tools/validate_worlds.py 50000 --size 5 --pits 4 --seed 7
"""
from __future__ import annotations

import argparse
import json
import os
import random
import sys
from typing import Dict, List, Optional

# Ensure we can import the package when run from a checkout
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wumpus_core.world import START, World, generate_world  # noqa: E402


def check_world(world: World, pits: int) -> List[str]:
    """Returns a list of violated invariants (empty when the world is valid)."""
    problems: List[str] = []
    predators = [pos for pos in world.coords() if world.at(pos).predator]
    golds = [pos for pos in world.coords() if world.at(pos).gold]
    pit_cells = world.pit_cells()
    if len(predators) != 1:
        problems.append(f"predators={len(predators)}")
    if len(golds) > 1:
        problems.append(f"golds={len(golds)}")
    if len(pit_cells) > pits:
        problems.append(f"pits={len(pit_cells)}")
    if not world.at(START).is_empty():
        problems.append("start occupied")
    for pos in world.coords():
        c = world.at(pos)
        if int(c.predator) + int(c.gold) + int(c.pit) > 1:
            problems.append(f"shared cell {pos}")
    return problems


def validate(count: int, size: int, pits: int, seed: Optional[int] = None) -> Dict[str, object]:
    rng = random.Random(seed)
    anomalies = 0
    samples: List[dict] = []
    hits: Dict[str, Dict[str, int]] = {"predator": {}, "gold": {}, "pit": {}}

    for n in range(count):
        world = generate_world(size, pits, seed=rng.randrange(1 << 30))
        problems = check_world(world, pits)
        if problems:
            anomalies += 1
            if len(samples) < 5:
                samples.append({"world": n, "problems": problems, "layout": world.pretty()})
        for pos in world.coords():
            cell = world.at(pos)
            key = f"{pos[0]},{pos[1]}"
            for name in ("predator", "gold", "pit"):
                if getattr(cell, name):
                    hits[name][key] = hits[name].get(key, 0) + 1

    return {
        "worlds": count,
        "size": size,
        "pits": pits,
        "anomalies": anomalies,
        "anomalySamples": samples,
        "hits": hits,
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate random Wumpus world generation")
    parser.add_argument("count", nargs="?", type=int, default=10000)
    parser.add_argument("--size", type=int, default=4)
    parser.add_argument("--pits", type=int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    summary = validate(max(1, args.count), args.size, args.pits, args.seed)
    print(json.dumps(summary, indent=2))
    return 1 if summary["anomalies"] else 0


if __name__ == "__main__":
    sys.exit(main())
