#!/usr/bin/env python3
"""
Default fitness function for five-role palettes built around a primary color.

A solution is 15 integers: five consecutive RGB triples, one per role in
``PALETTE_ROLES``. Higher scores mean a more usable palette.
"""

import numpy as np

from palette_colors import color_distance, contrast_ratio


PALETTE_ROLES = ('accent', 'background', 'surface', 'button_text', 'main_text')
ROLE_LABELS = {
    'accent': 'Accent',
    'background': 'Background',
    'surface': 'Surface',
    'button_text': 'Button Text',
    'main_text': 'Main text',
}
SOLUTION_LENGTH = 3 * len(PALETTE_ROLES)

# WCAG targets
AAA_TEXT = 7.0
AA_TEXT = 4.5

# Preferred CIEDE2000 distances
ACCENT_TARGET_DISTANCE = 30.0
SURFACE_TARGET_DISTANCE = 6.0
BACKGROUND_MIN_DISTANCE = 40.0


def split_roles(solution):
    """Map each role name to its RGB triple as a numpy array."""
    values = np.asarray(solution, dtype=float)
    if values.shape != (SOLUTION_LENGTH,):
        raise ValueError(f"Solution must hold {SOLUTION_LENGTH} channels, got shape {values.shape}")
    return {role: values[3 * i:3 * i + 3] for i, role in enumerate(PALETTE_ROLES)}


def _capped(ratio, target):
    return min(ratio, target) / target


def _closeness(distance, target, spread):
    """1.0 at the target distance, falling off linearly over ``spread``."""
    return max(0.0, 1.0 - abs(distance - target) / spread)


def evaluate_solution(anchor, solution):
    """
    Score a palette against the anchor color.

    Terms (each in 0-1, weighted):
      - main text readable on background and surface (AAA)
      - button text readable on the primary color and on the accent (AA)
      - accent related to but distinct from the primary color
      - surface a subtle step away from the background
      - background well separated from the primary color

    Returns:
        Score, higher is better. Pure function of its inputs.
    """
    primary = np.asarray(anchor, dtype=float)
    roles = split_roles(solution)

    readability = (
        2.0 * _capped(contrast_ratio(roles['main_text'], roles['background']), AAA_TEXT) +
        1.5 * _capped(contrast_ratio(roles['main_text'], roles['surface']), AAA_TEXT) +
        1.0 * _capped(contrast_ratio(roles['button_text'], primary), AA_TEXT) +
        1.0 * _capped(contrast_ratio(roles['button_text'], roles['accent']), AA_TEXT)
    )

    harmony = (
        1.0 * _closeness(color_distance(roles['accent'], primary), ACCENT_TARGET_DISTANCE, 40.0) +
        0.5 * _closeness(color_distance(roles['surface'], roles['background']), SURFACE_TARGET_DISTANCE, 20.0)
    )

    separation = 0.5 * min(color_distance(roles['background'], primary), BACKGROUND_MIN_DISTANCE) / BACKGROUND_MIN_DISTANCE

    return float(readability + harmony + separation)
