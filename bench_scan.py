import argparse
import json
import time
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from dirscan import config
from dirscan.core import DirScanApp


def run_once(src: Path, store_config: config.StoreConfig, db_dir: Path, batch_size: Optional[int]) -> float:
    db_dir.mkdir(parents=True, exist_ok=True)
    db_path = db_dir / f"bench_{uuid.uuid4().hex}.db"
    try:
        app = DirScanApp(db_path, store_config)
        t0 = time.perf_counter()
        app.scan(src, batch_size=batch_size)
        return time.perf_counter() - t0
    finally:
        if db_path.exists():
            db_path.unlink()


def benchmark(src: Path, profiles: Iterable[str], repeats: int, db_dir: Path, batch_size: Optional[int],
              cache_pages: Optional[int], out_file: Path):
    profile_list = list(profiles)
    results = []
    for name in profile_list:
        store_config = config.PROFILES[name]
        if cache_pages is not None:
            store_config = replace(store_config, cache_pages=cache_pages)

        warm_avg: Optional[float] = None
        times: List[float] = [run_once(src, store_config, db_dir, batch_size) for _ in range(repeats)]
        cold = times[0]
        warm_runs = times[1:]
        if warm_runs:
            warm_avg = sum(warm_runs) / len(warm_runs)
            print(f"{name}: {cold:.2f}s (cold), avg warm over {len(warm_runs)} runs: {warm_avg:.2f}s")
        else:
            print(f"{name}: {cold:.2f}s (single run)")
        results.append(
            {
                "profile": name,
                "durability": store_config.durability,
                "journal": store_config.journal,
                "cache_pages": store_config.cache_pages,
                "times": times,
                "cold": cold,
                "warm_avg": warm_avg,
            }
        )

    out_file.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "timestamp": datetime.now().isoformat(),
        "src": str(src),
        "db_dir": str(db_dir),
        "batch_size": batch_size,
        "repeats": repeats,
        "results": results,
    }
    out_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Wrote results to {out_file}")


def parse_args():
    p = argparse.ArgumentParser(description="Benchmark dirscan store profiles against one source tree.")
    p.add_argument("src", type=Path, help="Source root to scan")
    p.add_argument("--profiles", nargs="+", choices=sorted(config.PROFILES), default=["fast", "safe"], help="Profiles to compare")
    p.add_argument("--repeats", type=int, default=3, help="Runs per profile; first is treated as cold")
    p.add_argument("--db-dir", type=Path, default=Path("."), dest="db_dir", help="Directory for per-run temp stores (put it on the media you want to measure)")
    p.add_argument("--batch-size", type=int, default=None, help="Commit every N records (default: one transaction)")
    p.add_argument("--cache-pages", type=int, default=None, help="Override the profiles' page cache size")
    p.add_argument("--output", type=Path, default=Path("bench_scan_results.json"), help="Path to write JSON results")
    return p.parse_args()


def main():
    args = parse_args()
    benchmark(args.src, args.profiles, args.repeats, args.db_dir, args.batch_size, args.cache_pages, args.output)


if __name__ == "__main__":
    main()
