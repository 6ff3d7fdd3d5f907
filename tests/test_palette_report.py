"""
Tests for the console and matplotlib reports.
"""
import matplotlib.pyplot as plt

from palette_report import palette_swatches, print_run_summary, visualize_run
from simulated_annealing import AnnealingConfig, RunState, SimulatedAnnealing, generate_palette


def finished_run():
    return generate_palette('#3366CC', AnnealingConfig(max_iterations=4), seed=3)


def test_palette_swatches_lists_primary_then_roles():
    swatches = palette_swatches((1, 2, 3), list(range(15)))
    labels = [label for label, _ in swatches]
    assert labels == ['Primary', 'Accent', 'Background', 'Surface', 'Button Text', 'Main text']
    assert list(swatches[0][1]) == [1, 2, 3]
    assert list(swatches[-1][1]) == [12, 13, 14]


def test_print_run_summary(capsys):
    snapshot = finished_run()
    print_run_summary(snapshot)
    out = capsys.readouterr().out
    assert "ANNEALED PALETTE" in out
    assert "Main text" in out
    assert "exhausted" in out or "converged" in out


def test_print_run_summary_without_run(capsys):
    print_run_summary(SimulatedAnnealing().snapshot())
    assert "No run has been started" in capsys.readouterr().out


def test_visualize_run_saves_png(tmp_path):
    snapshot = finished_run()
    assert snapshot.state in (RunState.EXHAUSTED, RunState.CONVERGED)
    path = tmp_path / 'palette.png'
    fig = visualize_run(snapshot, path=str(path))
    try:
        assert path.exists()
        assert len(fig.axes) == 3
    finally:
        plt.close(fig)
