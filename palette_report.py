#!/usr/bin/env python3
"""
Console and matplotlib reports for a finished palette search.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from palette_colors import calculate_luminance, contrast_ratio, to_hex
from palette_fitness import PALETTE_ROLES, ROLE_LABELS, split_roles


def palette_swatches(anchor, solution):
    """Ordered ``(label, rgb)`` pairs: the primary color followed by each role."""
    roles = split_roles(solution)
    swatches = [('Primary', np.asarray(anchor, dtype=int))]
    for role in PALETTE_ROLES:
        swatches.append((ROLE_LABELS[role], roles[role].astype(int)))
    return swatches


def print_run_summary(snapshot):
    """Print the final palette and run statistics."""
    print("\n" + "=" * 70)
    print("ANNEALED PALETTE")
    print("=" * 70)

    if not snapshot.solution:
        print("No run has been started.")
        return

    roles = split_roles(snapshot.solution)
    background = roles['background']
    for label, rgb in palette_swatches(snapshot.anchor, snapshot.solution):
        rgb_text = f"RGB({rgb[0]:3d}, {rgb[1]:3d}, {rgb[2]:3d})"
        contrast = contrast_ratio(rgb, background)
        print(f"{label:<12} {to_hex(rgb)} | {rgb_text} | Contrast (background): {contrast:.2f}:1")

    total = snapshot.accepted_moves + snapshot.rejected_moves
    print("\n" + "-" * 70)
    print("RUN STATISTICS:")
    print("-" * 70)
    print(f"  State:             {snapshot.state.value}")
    print(f"  Iterations:        {snapshot.iteration}")
    print(f"  Final temperature: {snapshot.temperature:.5f}")
    print(f"  Accepted moves:    {snapshot.accepted_moves} ({snapshot.accepted_moves / max(1, total):.1%})")
    if snapshot.metrics:
        fitness = [m.fitness for m in snapshot.metrics]
        print(f"  Fitness:           start {fitness[0]:.4f}, best {max(fitness):.4f}, last {fitness[-1]:.4f}")
    print("=" * 70)


def visualize_run(snapshot, path=None, show=False):
    """
    Draw the palette swatches with the fitness and temperature histories.

    Args:
        snapshot: Finished (or in-progress) RunSnapshot
        path: Save the figure here when given
        show: Call ``plt.show()`` afterwards

    Returns:
        The matplotlib Figure
    """
    fig, axes = plt.subplots(3, 1, figsize=(12, 9),
                             gridspec_kw={'height_ratios': [2, 1.2, 1]})

    ax1 = axes[0]
    swatches = palette_swatches(snapshot.anchor, snapshot.solution) if snapshot.solution else []
    ax1.set_xlim(0, max(1, len(swatches)))
    ax1.set_ylim(0, 1)
    for i, (label, rgb) in enumerate(swatches):
        ax1.add_patch(Rectangle((i, 0), 1, 1, facecolor=rgb / 255.0, edgecolor='black', linewidth=2))
        text_color = 'white' if calculate_luminance(rgb) < 0.5 else 'black'
        ax1.text(i + 0.5, 0.65, label, ha='center', va='center',
                 fontsize=10, fontweight='bold', color=text_color)
        ax1.text(i + 0.5, 0.4, to_hex(rgb), ha='center', va='center',
                 fontsize=11, color=text_color, family='monospace')
    ax1.set_xticks([])
    ax1.set_yticks([])
    ax1.set_title("Annealed Palette", fontsize=14, fontweight='bold', pad=12)

    iterations = [m.iteration for m in snapshot.metrics]

    ax2 = axes[1]
    ax2.plot(iterations, [m.fitness for m in snapshot.metrics], color='tab:blue')
    ax2.fill_between(iterations, [m.fitness for m in snapshot.metrics], alpha=0.15, color='tab:blue')
    ax2.set_title("Solution Fitness Over Time", fontsize=12, fontweight='bold')
    ax2.set_ylabel("Fitness")

    ax3 = axes[2]
    ax3.plot(iterations, [m.temperature for m in snapshot.metrics], color='tab:orange')
    ax3.fill_between(iterations, [m.temperature for m in snapshot.metrics], alpha=0.15, color='tab:orange')
    ax3.set_title("Temperature Over Time", fontsize=12, fontweight='bold')
    ax3.set_xlabel("Iteration")
    ax3.set_ylabel("Temperature")

    plt.tight_layout()

    if path:
        fig.savefig(path, dpi=150, bbox_inches='tight')
        print(f"\nVisualization saved to: {path}")
    if show:
        plt.show()
    return fig
