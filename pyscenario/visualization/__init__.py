"""
Module for visualizing scenarios.

This init file handles the plot folder, where
the plots are saved, houses helper functions for
the plotting functions and defines the default
plot aesthetics.
"""
from __future__ import annotations

import colorsys
from pathlib import Path
from typing import Optional

import matplotlib as mpl
import matplotlib.pyplot as plt

# Plotting folder -------------------------------------------
PLOT_FOLDER = Path("plots")

def register_plot_dir(path: Optional[str]) -> None:
    """
    Change the default plot folder.
    """
    global PLOT_FOLDER
    PLOT_FOLDER = Path(path)

def _plot_folder() -> Path:
    """
    The current plot folder, created on first use.
    """
    PLOT_FOLDER.mkdir(parents=True, exist_ok=True)
    return PLOT_FOLDER

# Plotting helpers ------------------------------------------
cc = mpl.colors.ColorConverter.to_rgb

def scale_lightness(rgb, scale_l):
    """
    Scale the lightness of an rgb color.
    """
    # Convert rgb to hls (hue, lightness, saturation)
    h, l, s = colorsys.rgb_to_hls(*rgb)
    # Manipulate h, l, s values and return as rgb
    return colorsys.hls_to_rgb(h, min(1, l * scale_l), s = s)

# Colorwheels-----------------------------------------------
COLORWHEEL = [
    "#264653",
    "#2a9d8f",
    "#e9c46a",
    "#f4a261",
    "#e76f51",
    "#E45C3A",
    "#732626"
]
COLORWHEEL_DARK = [scale_lightness(cc(c), 0.6) for c in COLORWHEEL]

# Matplotlib settings ---------------------------------------
plt.style.use('bmh')
plt.rcParams["font.family"] = "monospace"

from .scenario import plot_scenario
