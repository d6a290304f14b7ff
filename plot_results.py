"""
Plot graphs from the run_experiments.py results CSV.
Produces:
 - plots/time_vs_workers_<WxH>.png
 - plots/speedup_vs_workers_<WxH>.png
 - plots/efficiency_vs_workers_<WxH>.png
 - plots/cpu_vs_workers_<WxH>.png
 - plots/time_vs_resolution_workers<N>.png
 - plots/cpu_grid.png
"""

import argparse
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.patches import Rectangle

# CPU_MAX scale for the grid: green -> yellow -> red
CPU_CMAP = LinearSegmentedColormap.from_list(
    "cpu_max_cmap",
    [(0, "green"), (0.5, "yellow"), (1, "red")]
)


def load_results(csv_path):
    df = pd.read_csv(csv_path)
    for col in ('workers', 'width', 'height', 'time_ms', 'cpu_avg', 'cpu_max'):
        if col not in df.columns:
            df[col] = 0
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0)
    df[['workers', 'width', 'height']] = df[['workers', 'width', 'height']].astype(int)
    df['res_label'] = df['width'].astype(str) + "x" + df['height'].astype(str)
    return df


def scaling_table(df, width, height):
    """Median time per worker count with speedup and efficiency against the 1-worker run."""
    sub = df[(df['width'] == width) & (df['height'] == height)]
    g = sub.groupby('workers')[['time_ms', 'cpu_avg', 'cpu_max']].median().reset_index().sort_values('workers')
    base = g[g['workers'] == 1]['time_ms']
    seq_time = float(base.values[0]) if len(base) else float(g['time_ms'].iloc[0])
    g['speedup'] = seq_time / g['time_ms'].replace(0, np.nan)
    g['efficiency'] = g['speedup'] / g['workers']
    return g


def _save_line(x, ys, xlabel, ylabel, title, path, ideal=None):
    plt.figure()
    for label, y in ys.items():
        plt.plot(x, y, marker='o', label=label)
    if ideal is not None:
        plt.plot(x, ideal, linestyle='--', label='Ideal')
    if len(ys) > 1 or ideal is not None:
        plt.legend()
    plt.xlabel(xlabel)
    plt.ylabel(ylabel)
    plt.title(title)
    plt.grid(True)
    plt.savefig(path, dpi=200)
    plt.close()


def plot_for_resolution(df, width, height, outdir):
    g = scaling_table(df, width, height)
    os.makedirs(outdir, exist_ok=True)
    res = f"{width}x{height}"
    w = g['workers']
    _save_line(w, {'Time': g['time_ms']}, 'Workers', 'Time (ms)', f'Time vs Workers ({res})',
               os.path.join(outdir, f"time_vs_workers_{res}.png"))
    _save_line(w, {'Measured': g['speedup']}, 'Workers', 'Speedup', f'Speedup vs Workers ({res})',
               os.path.join(outdir, f"speedup_vs_workers_{res}.png"), ideal=w)
    _save_line(w, {'Efficiency': g['efficiency']}, 'Workers', 'Efficiency', f'Efficiency vs Workers ({res})',
               os.path.join(outdir, f"efficiency_vs_workers_{res}.png"))
    _save_line(w, {'CPU Avg': g['cpu_avg'], 'CPU Max': g['cpu_max']}, 'Workers', 'CPU (%)',
               f'CPU vs Workers ({res})', os.path.join(outdir, f"cpu_vs_workers_{res}.png"))


def plot_time_vs_resolution(df, workers, outdir):
    sub = df[df['workers'] == workers].copy()
    if sub.empty:
        print(f"No data for workers={workers} to plot time vs resolution.")
        return
    sub['pixels'] = sub['width'] * sub['height']
    g = sub.groupby(['width', 'height', 'pixels'])['time_ms'].median().reset_index().sort_values('pixels')
    os.makedirs(outdir, exist_ok=True)
    plt.figure()
    plt.plot(g['pixels'], g['time_ms'], marker='o')
    plt.xscale('log')
    plt.yscale('log')
    plt.xlabel('Pixels (log)')
    plt.ylabel('Time (ms) (log)')
    plt.title(f'Time vs Resolution (workers={workers})')
    plt.grid(True)
    plt.savefig(os.path.join(outdir, f"time_vs_resolution_workers{workers}.png"), dpi=200)
    plt.close()


def plot_cpu_grid(df, outfile):
    """One cell per (resolution, workers): outer shade = CPU_AVG, inner color = CPU_MAX."""
    grouped = df.groupby(['res_label', 'workers'])[['cpu_avg', 'cpu_max', 'width', 'height']].median().reset_index()
    res_info = grouped[['res_label', 'width', 'height']].drop_duplicates().copy()
    res_info['pixels'] = res_info['width'] * res_info['height']
    res_list = list(res_info.sort_values('pixels')['res_label'])
    worker_order = sorted(grouped['workers'].unique())

    pivot_avg = grouped.pivot(index='res_label', columns='workers', values='cpu_avg').reindex(index=res_list, columns=worker_order).fillna(0.0)
    pivot_max = grouped.pivot(index='res_label', columns='workers', values='cpu_max').reindex(index=res_list, columns=worker_order).fillna(0.0)

    nrows, ncols = pivot_avg.shape
    if nrows == 0 or ncols == 0:
        raise RuntimeError("No data to plot: results contain no cpu_avg/cpu_max rows.")

    fig, ax = plt.subplots(figsize=(max(6, ncols * 1.2), max(4, nrows * 0.9)))
    ax.set_xlim(0, ncols)
    ax.set_ylim(0, nrows)
    ax.invert_yaxis()  # smallest resolution on top

    inner = 0.7
    inset = (1.0 - inner) / 2.0
    for i, res in enumerate(pivot_avg.index):
        for j, t in enumerate(pivot_avg.columns):
            avg_val = float(pivot_avg.loc[res, t])
            max_val = float(pivot_max.loc[res, t])
            darkness = 1 - np.clip(avg_val / 100.0, 0.0, 1.0)
            ax.add_patch(Rectangle((j, i), 1.0, 1.0, facecolor=(darkness,) * 3,
                                   edgecolor="black", linewidth=0.8))
            ax.add_patch(Rectangle((j + inset, i + inset), inner, inner,
                                   facecolor=CPU_CMAP(np.clip(max_val / 100.0, 0.0, 1.0)),
                                   edgecolor="black", linewidth=0.6))
            ax.text(j + 0.5, i + 0.5, f"{avg_val:.0f}/{max_val:.0f}", ha="center", va="center",
                    fontsize=9, color="white" if avg_val > 55 else "black", fontweight="bold")

    ax.set_xticks(np.arange(ncols) + 0.5)
    ax.set_xticklabels([str(t) for t in pivot_avg.columns], fontsize=10)
    ax.set_yticks(np.arange(nrows) + 0.5)
    ax.set_yticklabels(list(pivot_avg.index), fontsize=10)
    ax.set_xlabel("Workers")
    ax.set_ylabel("Resolution")
    ax.set_title("CPU Utilisation Grid\nOuter = CPU_AVG darkness, Inner = CPU_MAX color\nText = AVG/MAX", fontsize=11)

    cax = fig.add_axes([0.92, 0.15, 0.02, 0.7])
    cb = plt.colorbar(matplotlib.cm.ScalarMappable(norm=plt.Normalize(vmin=0, vmax=100), cmap=CPU_CMAP), cax=cax)
    cb.set_label('CPU_MAX (%)')

    ax.set_aspect('equal')
    fig.subplots_adjust(right=0.9)
    os.makedirs(os.path.dirname(outfile) or '.', exist_ok=True)
    fig.savefig(outfile, dpi=220)
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--csv', default='results/results.csv')
    parser.add_argument('--outdir', default='plots')
    parser.add_argument('--workers', type=int, default=16, help='worker count for the resolution plot')
    args = parser.parse_args(argv)

    df = load_results(args.csv)
    for w, h in df[['width', 'height']].drop_duplicates().values.tolist():
        plot_for_resolution(df, int(w), int(h), args.outdir)
    plot_time_vs_resolution(df, args.workers, args.outdir)
    plot_cpu_grid(df, os.path.join(args.outdir, "cpu_grid.png"))

    print("Plots saved in", args.outdir)


if __name__ == '__main__':
    main()
