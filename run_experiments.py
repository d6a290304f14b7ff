"""
Batch runner: render a scene for several worker counts and resolutions and log results to CSV.

Usage:
  python run_experiments.py --scene scenes/mirrors.json --out results/results.csv
  python run_experiments.py --workers 1,2,4 --res 320x240,640x480 --executor thread
"""

import argparse
import csv
import logging
import os
import statistics
import subprocess
import sys
import time

DEFAULT_WORKERS = [1, 2, 4, 8, 16]
DEFAULT_RES = ["320x240", "640x480", "1280x720"]
DEFAULT_CHUNK = 256
REPEATS = 3

CSV_HEADER = ["workers", "width", "height", "chunk_size", "executor", "run_index",
              "time_ms", "cpu_avg", "cpu_max", "outfile", "returncode"]

logger = logging.getLogger("run_experiments")


def parse_metrics(output):
    """Pull RENDER_TIME_MS / CPU_AVG / CPU_MAX out of a render's stdout."""
    keys = {"RENDER_TIME_MS": "time_ms", "CPU_AVG": "cpu_avg", "CPU_MAX": "cpu_max"}
    metrics = dict.fromkeys(keys.values())
    for line in output.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key in keys:
            try:
                metrics[keys[key]] = float(value.strip())
            except ValueError:
                logger.warning("unparsable metric line: %r", line)
    return metrics


def parse_resolution(text):
    w, h = text.lower().split("x")
    return int(w), int(h)


def render_command(scene, w, h, workers, chunk, executor, outfile):
    cmd = [
        sys.executable, "-m", "whitted",
        "--width", str(w),
        "--height", str(h),
        "--workers", str(workers),
        "--chunk-size", str(chunk),
        "--executor", executor,
        "--outfile", outfile,
        "--mode", "parallel" if workers > 1 else "sequential",
        "--log-level", "WARNING",
    ]
    if scene:
        cmd += ["--scene", scene]
    return cmd


def run_one(cmd):
    proc = subprocess.run(cmd, capture_output=True, text=True)
    if proc.returncode != 0:
        logger.error("render failed (%d): %s", proc.returncode, proc.stderr.strip())
    return parse_metrics(proc.stdout), proc.returncode


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--scene', help='scene file (default: built-in scene)')
    parser.add_argument('--out', default='results/results.csv')
    parser.add_argument('--workers', default=",".join(str(t) for t in DEFAULT_WORKERS))
    parser.add_argument('--res', default=",".join(DEFAULT_RES))
    parser.add_argument('--chunk-size', type=int, default=DEFAULT_CHUNK, dest='chunk_size')
    parser.add_argument('--executor', choices=['thread', 'process'], default='process')
    parser.add_argument('--repeats', type=int, default=REPEATS)
    parser.add_argument('--pause', type=float, default=0.5, help='seconds to sleep between runs')
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    out_dir = os.path.dirname(args.out) or '.'
    os.makedirs(out_dir, exist_ok=True)
    with open(args.out, 'w', newline='') as csvfile:
        csv.writer(csvfile).writerow(CSV_HEADER)

    worker_list = [int(x) for x in args.workers.split(",")]
    res_list = [parse_resolution(x) for x in args.res.split(",")]

    for w, h in res_list:
        for t in worker_list:
            times = []
            for r in range(args.repeats):
                out_file = os.path.join(out_dir, f"out_{w}x{h}_t{t}_c{args.chunk_size}_r{r}.png")
                logger.info("Running: %dx%d, workers=%d, repeat=%d", w, h, t, r)
                cmd = render_command(args.scene, w, h, t, args.chunk_size, args.executor, out_file)
                metrics, code = run_one(cmd)

                if metrics['time_ms'] is None:
                    logger.warning("failed to parse RENDER_TIME_MS, recording 0")
                row = [t, w, h, args.chunk_size, args.executor, r,
                       f"{metrics['time_ms'] or 0.0:.3f}",
                       f"{metrics['cpu_avg'] or 0.0:.2f}",
                       f"{metrics['cpu_max'] or 0.0:.2f}",
                       out_file, code]
                with open(args.out, 'a', newline='') as csvfile:
                    csv.writer(csvfile).writerow(row)

                times.append(metrics['time_ms'] or 0.0)
                time.sleep(args.pause)

            logger.info("Median time for %dx%d, workers=%d: %.3f ms", w, h, t, statistics.median(times))

    logger.info("All done. Results in %s", args.out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
