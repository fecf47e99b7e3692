"""
Plot a scenario: the tracks of all targets
inside the scenario's bounding box.
"""
from __future__ import annotations

from itertools import cycle
from pathlib import Path

from ..logger import logger
from ..tracker import NoPriorSample, ScenarioTracker
from ..utils import TimeLike
from . import COLORWHEEL, COLORWHEEL_DARK, _plot_folder, plt

def _check_duplicate_file_name(filename: str) -> Path:
    """
    Check if a file with the same name
    already exists in the plot folder.

    If it does, append a number to the filename
    and return the new path.
    """
    folder = _plot_folder()
    if not (folder / filename).exists():
        return folder / filename
    stem, suffix = Path(filename).stem, Path(filename).suffix
    i = 1
    while (folder / f"{stem}_{i}{suffix}").exists():
        i += 1
    return folder / f"{stem}_{i}{suffix}"

def plot_scenario(tracker: ScenarioTracker,
                  fname: str | None = None,
                  at: TimeLike | None = None) -> Path:
    """
    Plots the tracks of all targets with a known
    position and the scenario's bounding box.

    Parameters
    ----------
    tracker : ScenarioTracker
        The scenario to plot.
    fname : str, optional
        File name inside the plot folder.
        Defaults to "scenario.png".
    at : TimeLike, optional
        If given, every target's (possibly estimated)
        position at this time is marked. Targets without
        a position before `at` are left unmarked.
        Positions outside the bounding box (dead reckoned
        beyond the observed area) are drawn as crosses.

    Returns
    -------
    Path
        The path of the saved figure.
    """
    fig, ax = plt.subplots(figsize=(10,10))
    box = tracker.bounding_box()
    colors = zip(cycle(COLORWHEEL), cycle(COLORWHEEL_DARK))
    targets = sorted(tracker.targets_with_position(), key=lambda t: t.mmsi)

    for target, (color, dark) in zip(targets, colors):
        samples = target.position_reports()
        ax.plot(
            [s.lon for s in samples],
            [s.lat for s in samples],
            color=color, linewidth=1, marker=".", label=target.name
        )
        if at is None:
            continue
        try:
            now = target.position_at(at)
        except NoPriorSample:
            continue
        outside = box is not None and not box.contains(now.position)
        ax.scatter(
            now.lon, now.lat, color=dark, s=40, zorder=3,
            marker="x" if outside else "o"
        )

    if box is not None:
        c = box.center
        ax.set_title(f"{len(targets)} targets around {c.lat:.4f}N {c.lon:.4f}E")
        ax.add_patch(plt.Rectangle(
            (box.LONMIN, box.LATMIN),
            box.LONMAX - box.LONMIN,
            box.LATMAX - box.LATMIN,
            fill=False, linestyle="--", color="#999999"
        ))

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    if targets:
        ax.legend(loc="upper right", fontsize="small")

    path = _check_duplicate_file_name(fname or "scenario.png")
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"Scenario plot saved to {path}")
    return path
