#!/usr/bin/env python3
"""
Color science helpers: CIELAB conversion, CIEDE2000 distance and WCAG contrast.
"""

import re

import numpy as np


HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def _linearize(channels, threshold):
    """Undo the sRGB gamma curve for channels already scaled to 0-1."""
    channels = np.asarray(channels, dtype=float)
    return np.where(channels <= threshold,
                    channels / 12.92,
                    ((channels + 0.055) / 1.055) ** 2.4)


def rgb_to_xyz(rgb):
    """Convert RGB (0-255) to XYZ color space."""
    r, g, b = _linearize(np.asarray(rgb, dtype=float) / 255.0, 0.04045)

    # sRGB D65 matrix
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041

    return np.array([x, y, z]) * 100


def xyz_to_lab(xyz):
    """Convert XYZ to LAB color space."""
    white = np.array([95.047, 100.000, 108.883])
    t = np.asarray(xyz, dtype=float) / white

    delta = 6 / 29
    f = np.where(t > delta ** 3, np.cbrt(t), t / (3 * delta ** 2) + 4 / 29)
    fx, fy, fz = f

    return np.array([116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)])


def rgb_to_lab(rgb):
    """Convert RGB (0-255) to LAB color space."""
    return xyz_to_lab(rgb_to_xyz(rgb))


def delta_e_cie2000(lab1, lab2):
    """CIEDE2000 color difference between two LAB colors."""
    L1, a1, b1 = lab1
    L2, a2, b2 = lab2

    C_bar = (np.hypot(a1, b1) + np.hypot(a2, b2)) / 2
    G = 0.5 * (1 - np.sqrt(C_bar ** 7 / (C_bar ** 7 + 25 ** 7)))

    a1p, a2p = a1 * (1 + G), a2 * (1 + G)
    C1p, C2p = np.hypot(a1p, b1), np.hypot(a2p, b2)
    h1p = np.arctan2(b1, a1p) % (2 * np.pi)
    h2p = np.arctan2(b2, a2p) % (2 * np.pi)

    dLp = L2 - L1
    dCp = C2p - C1p

    achromatic = C1p * C2p == 0
    dh = h2p - h1p
    if achromatic:
        dh = 0.0
    elif dh > np.pi:
        dh -= 2 * np.pi
    elif dh < -np.pi:
        dh += 2 * np.pi
    dHp = 2 * np.sqrt(C1p * C2p) * np.sin(dh / 2)

    Lp_bar = (L1 + L2) / 2
    Cp_bar = (C1p + C2p) / 2

    h_sum = h1p + h2p
    if achromatic:
        hp_bar = h_sum
    elif abs(h1p - h2p) <= np.pi:
        hp_bar = h_sum / 2
    elif h_sum < 2 * np.pi:
        hp_bar = (h_sum + 2 * np.pi) / 2
    else:
        hp_bar = (h_sum - 2 * np.pi) / 2

    T = (1 - 0.17 * np.cos(hp_bar - np.radians(30))
         + 0.24 * np.cos(2 * hp_bar)
         + 0.32 * np.cos(3 * hp_bar + np.radians(6))
         - 0.20 * np.cos(4 * hp_bar - np.radians(63)))

    d_theta = np.radians(30) * np.exp(-((hp_bar - np.radians(275)) / np.radians(25)) ** 2)
    R_C = 2 * np.sqrt(Cp_bar ** 7 / (Cp_bar ** 7 + 25 ** 7))
    R_T = -np.sin(2 * d_theta) * R_C

    S_L = 1 + (0.015 * (Lp_bar - 50) ** 2) / np.sqrt(20 + (Lp_bar - 50) ** 2)
    S_C = 1 + 0.045 * Cp_bar
    S_H = 1 + 0.015 * Cp_bar * T

    lightness = dLp / S_L
    chroma = dCp / S_C
    hue = dHp / S_H
    return float(np.sqrt(lightness ** 2 + chroma ** 2 + hue ** 2 + R_T * chroma * hue))


def color_distance(rgb1, rgb2):
    """CIEDE2000 distance between two RGB (0-255) colors."""
    return delta_e_cie2000(rgb_to_lab(rgb1), rgb_to_lab(rgb2))


def calculate_luminance(rgb):
    """Relative luminance as used by WCAG contrast ratios."""
    r, g, b = _linearize(np.asarray(rgb, dtype=float) / 255.0, 0.03928)
    return float(0.2126 * r + 0.7152 * g + 0.0722 * b)


def contrast_ratio(rgb1, rgb2):
    """WCAG contrast ratio between two RGB colors, from 1 to 21."""
    l1 = calculate_luminance(rgb1)
    l2 = calculate_luminance(rgb2)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def to_hex(rgb):
    """Format an RGB triple as ``#RRGGBB``."""
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def parse_color(value):
    """
    Parse an anchor color into an ``(r, g, b)`` tuple of ints.

    Accepts ``#RRGGBB``, ``RRGGBB``, ``#RGB`` or a sequence of three integers
    in 0-255. Raises ``ValueError`` for anything else.
    """
    if isinstance(value, str):
        match = HEX_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"The primary color must be a valid hex value, got {value!r}")
        digits = match.group(1)
        if len(digits) == 3:
            digits = ''.join(c * 2 for c in digits)
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))

    try:
        channels = [c for c in value]
    except TypeError:
        raise ValueError(f"Color must be a hex string or an RGB triple, got {value!r}") from None

    if len(channels) != 3:
        raise ValueError(f"RGB color needs exactly 3 channels, got {len(channels)}")
    parsed = []
    for c in channels:
        if isinstance(c, (bool, np.bool_)) or not isinstance(c, (int, np.integer)):
            raise ValueError(f"RGB channels must be integers, got {c!r}")
        if not 0 <= c <= 255:
            raise ValueError(f"RGB channels must be within 0-255, got {c}")
        parsed.append(int(c))
    return tuple(parsed)
