"""Visualization of a pipeline run, one panel per detection stage."""

from __future__ import annotations

from pathlib import Path

from stepheight.core.contracts import PipelineResult, ProfileData

# RGB 0-255
LINE_COLOR = (59, 156, 208)
HIGHLIGHT_COLOR = (242, 148, 0)
GREYED_OUT = (230, 230, 230)
GREYED_OUT_DARK = (200, 200, 200)

Y_BOUNDS = (-5.0, 20.0)


def _rgb(color: tuple[int, int, int]) -> tuple[float, float, float]:
    return tuple(c / 255.0 for c in color)


def _plot(ax, profile: ProfileData, color, **kwargs) -> None:
    ax.plot(profile.positions, profile.values, color=_rgb(color), **kwargs)


def plot_pipeline_result(
    result: PipelineResult,
    title: str = "Step detection",
    save_path: Path | None = None,
):
    """Plot scanned profile, derivatives, raw platforms and median platforms."""
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(5, 1, figsize=(10, 14), sharex=True)
    fig.suptitle(title)

    ax = axes[0]
    ax.set_title("Scanned profile")
    _plot(ax, result.scanned_profile, LINE_COLOR)

    ax = axes[1]
    ax.set_title("First derivative")
    _plot(ax, result.scanned_profile, GREYED_OUT)
    _plot(ax, result.first_derivative, LINE_COLOR)

    ax = axes[2]
    ax.set_title("Binarized derivative")
    _plot(ax, result.scanned_profile, GREYED_OUT)
    _plot(ax, result.first_derivative, GREYED_OUT_DARK)
    _plot(ax, result.binarized_derivative, LINE_COLOR)

    ax = axes[3]
    ax.set_title("Found steps")
    _plot(ax, result.first_derivative, GREYED_OUT)
    _plot(ax, result.binarized_derivative, GREYED_OUT_DARK)
    _plot(ax, result.scanned_profile, LINE_COLOR)
    for platform in result.raw_steps:
        _plot(ax, platform, HIGHLIGHT_COLOR, linewidth=2)

    ax = axes[4]
    ax.set_title("Median filtered steps")
    _plot(ax, result.first_derivative, GREYED_OUT)
    _plot(ax, result.binarized_derivative, GREYED_OUT_DARK)
    _plot(ax, result.scanned_profile, LINE_COLOR)
    for step in result.median_steps:
        _plot(ax, ProfileData.from_profile(step.to_profile()), HIGHLIGHT_COLOR, linewidth=2)

    for ax in axes:
        ax.set_ylim(*Y_BOUNDS)
        ax.set_ylabel("mm")
        ax.grid(True, alpha=0.3)
    axes[-1].set_xlabel("Position (mm)")
    fig.tight_layout()

    if save_path:
        fig.savefig(str(save_path), dpi=150, bbox_inches="tight")
    else:
        plt.show()
    plt.close(fig)
    return fig
