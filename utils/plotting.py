import io

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

LABEL_WIDTH = 30


def fig_to_png_bytes(fig) -> bytes:
    bio = io.BytesIO()
    fig.savefig(bio, format="png", bbox_inches="tight", dpi=100)
    plt.close(fig)
    bio.seek(0)
    return bio.getvalue()


def _short(label):
    text = str(label)
    return text if len(text) <= LABEL_WIDTH else text[:LABEL_WIDTH - 1] + "…"


def draw_histogram(values, bin_edges, column) -> bytes:
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.hist(values, bins=bin_edges, color="darkgreen", edgecolor="white", alpha=0.7)
    ax.set_title(f"Distribution of {column}")
    ax.set_xlabel(str(column))
    ax.set_ylabel("Frequency")
    ax.spines[["top", "right"]].set_visible(False)
    return fig_to_png_bytes(fig)


def draw_horizontal_bars(labels, counts, title, xlabel="Count") -> bytes:
    """Bars are drawn bottom-up, so the last label ends up on top"""
    fig, ax = plt.subplots(figsize=(10, max(4, 0.35 * len(labels) + 1.5)))
    positions = np.arange(len(labels))
    ax.barh(positions, counts, color="purple", alpha=0.8)
    ax.set_yticks(positions)
    ax.set_yticklabels([_short(label) for label in labels])
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.spines[["top", "right"]].set_visible(False)
    return fig_to_png_bytes(fig)


def draw_upset(combinations, set_sizes, title) -> bytes:
    """Upset-style plot: intersection sizes on top, membership matrix below, set sizes on the left.

    ``combinations`` is a sequence of (member columns, row count) in display order and
    ``set_sizes`` an ordered mapping of column -> total count, largest first.
    """
    columns = list(set_sizes.keys())
    n_sets = len(columns)
    n_combos = len(combinations)
    y_of = {col: n_sets - 1 - i for i, col in enumerate(columns)}

    fig = plt.figure(figsize=(max(8, 0.5 * n_combos + 4), 4 + 0.4 * n_sets))
    grid = fig.add_gridspec(2, 2, width_ratios=[1, 3], height_ratios=[3, max(1.0, 0.4 * n_sets)],
                            hspace=0.05, wspace=0.02)
    ax_bars = fig.add_subplot(grid[0, 1])
    ax_matrix = fig.add_subplot(grid[1, 1], sharex=ax_bars)
    ax_sets = fig.add_subplot(grid[1, 0], sharey=ax_matrix)

    x = np.arange(n_combos)
    counts = [count for _, count in combinations]
    ax_bars.bar(x, counts, color="#333333", width=0.6)
    for xi, count in zip(x, counts):
        ax_bars.text(xi, count, str(count), ha="center", va="bottom", fontsize=8)
    ax_bars.set_ylabel("Intersection size")
    ax_bars.set_title(title)
    ax_bars.tick_params(axis="x", bottom=False, labelbottom=False)
    ax_bars.spines[["top", "right"]].set_visible(False)

    # grey dots for every cell, dark dots and a connector for members
    for xi, (members, _) in zip(x, combinations):
        ax_matrix.scatter([xi] * n_sets, range(n_sets), color="#dddddd", s=60, zorder=1)
        ys = sorted(y_of[col] for col in members)
        ax_matrix.scatter([xi] * len(ys), ys, color="#333333", s=60, zorder=3)
        if len(ys) > 1:
            ax_matrix.plot([xi, xi], [ys[0], ys[-1]], color="#333333", linewidth=2, zorder=2)
    ax_matrix.set_yticks(range(n_sets))
    ax_matrix.set_yticklabels([f"{col}_NA" for col in reversed(columns)])
    ax_matrix.yaxis.tick_right()
    ax_matrix.tick_params(axis="x", bottom=False, labelbottom=False)
    ax_matrix.set_ylim(-0.5, n_sets - 0.5)
    for spine in ax_matrix.spines.values():
        spine.set_visible(False)

    ax_sets.barh([y_of[col] for col in columns], list(set_sizes.values()), color="#333333", height=0.5)
    ax_sets.invert_xaxis()
    ax_sets.set_xlabel("Set size")
    ax_sets.tick_params(axis="y", left=False, labelleft=False)
    ax_sets.spines[["top", "left"]].set_visible(False)

    return fig_to_png_bytes(fig)
