#!/usr/bin/env python3
"""
Example script that tunes the drive with the NSGA-II optimizer.

It runs ``optimize_drive`` on a shortened evaluation scenario, prints the
Pareto front and the per-generation history, and plots the trade-offs
between power loss, peak temperature and speed error.
"""

from __future__ import annotations

from pathlib import Path
import sys

import matplotlib.pyplot as plt

# Allow running the script directly from the repository root without installing.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from inverter_drive import EvaluationSettings, optimize_drive

# Optimizer configuration. The full reference run (N=50, G=100, 1 s per
# evaluation) takes a long time in pure Python; these settings finish quickly.
POPULATION_SIZE = 16
N_GENERATIONS = 8
EVALUATION_DURATION = 0.1   # s
N_WORKERS = 1
SEED = 7


def _print_section(title: str) -> None:
    line = "=" * 70
    print(f"\n{line}\n{title}\n{line}")


def describe_front(front) -> None:
    print(
        f"{'f_pwm [Hz]':>11} {'m':>6} {'fan':>6} {'coolant':>8} "
        f"{'loss [W]':>12} {'T_peak [°C]':>12} {'|Δω| [rad/s]':>13}"
    )
    print("-" * 75)
    for ind in front:
        g, o = ind.genes, ind.objectives
        print(
            f"{g.pwm_frequency:>11.0f} {g.modulation_index:>6.3f} {g.fan_speed:>6.2f} "
            f"{g.coolant_flow:>8.2f} {o.power_loss:>12.1f} {o.peak_temperature:>12.1f} "
            f"{o.speed_error:>13.2f}"
        )


def plot_front(front, population) -> None:
    """Scatter the population and highlight the Pareto front."""
    pairs = [
        ("power_loss", "peak_temperature", "Loss [W]", "Peak temperature [°C]"),
        ("power_loss", "speed_error", "Loss [W]", "Speed error [rad/s]"),
        ("peak_temperature", "speed_error", "Peak temperature [°C]", "Speed error [rad/s]"),
    ]

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    for ax, (x_name, y_name, x_label, y_label) in zip(axes, pairs):
        ax.scatter(
            [getattr(ind.objectives, x_name) for ind in population],
            [getattr(ind.objectives, y_name) for ind in population],
            color="lightgray", label="Population"
        )
        ax.scatter(
            [getattr(ind.objectives, x_name) for ind in front],
            [getattr(ind.objectives, y_name) for ind in front],
            color="tab:red", label="Pareto front"
        )
        ax.set_xlabel(x_label)
        ax.set_ylabel(y_label)
        ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.7)
        ax.legend()

    fig.suptitle("NSGA-II drive tuning trade-offs", fontsize=14)
    fig.tight_layout(rect=[0, 0.03, 1, 0.95])
    plt.show()


def main() -> None:
    _print_section("RUN NSGA-II OPTIMIZATION")
    front, optimizer = optimize_drive(
        population_size=POPULATION_SIZE,
        n_generations=N_GENERATIONS,
        evaluation=EvaluationSettings(duration=EVALUATION_DURATION),
        n_workers=N_WORKERS,
        seed=SEED,
        verbose=True
    )

    _print_section("PARETO FRONT")
    describe_front(front)

    if optimizer.history:
        _print_section("HISTORY (LAST 5 GENERATIONS)")
        for entry in optimizer.history[-5:]:
            print(
                f"Gen {entry['generation']:>3}: "
                f"front={entry['front_size']:>3} "
                f"best_loss={entry['best_power_loss']:.1f} "
                f"best_T={entry['best_peak_temperature']:.1f} "
                f"best_err={entry['best_speed_error']:.2f}"
            )

    _print_section("TRADE-OFF PLOTS")
    plot_front(front, optimizer.population)

    _print_section("DONE")
    print(
        "The optimizer returned a set of non-dominated drive settings. "
        "Pick one according to the loss/temperature/speed trade-off you need."
    )


if __name__ == "__main__":
    main()
