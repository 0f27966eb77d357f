"""
Tests for the simulated generation report.
"""
from practiceflow.services.generation_report import DEFAULT_RATING_BANDS, run_report, simulate_band


class TestSimulateBand:
    def test_counts_add_up(self, rng):
        band = simulate_band("Medium", 975, 40, rng=rng)
        assert band.selections == 40
        assert sum(band.label_counts.values()) == 40
        assert sum(band.template_counts.values()) == 40
        assert 0 <= band.label_share("Medium") <= 1

    def test_no_decimals_or_duplicates(self, rng):
        band = simulate_band("Hard", 1125, 40, rng=rng)
        assert band.decimal_leaks == 0
        assert band.duplicate_choices == 0

    def test_rookie_band_stays_add_sub(self, rng):
        band = simulate_band("Rookie", 810, 20, rng=rng)
        assert set(band.template_counts) == {"add_sub"}
        assert band.negative_subtractions == 0


class TestRunReport:
    def test_report_shape(self, rng):
        report = run_report(15, [("Easy", 850), ("Expert", 1275)], rng, puzzle_samples=12)
        assert [b.name for b in report.bands] == ["Easy", "Expert"]
        assert report.puzzles_checked == 12
        assert report.unsafe_puzzles == 0
        for band in report.bands:
            assert set(band.failures) <= set(report.failures)
        assert report.ok == (not report.failures)

    def test_default_bands(self):
        assert [name for name, _ in DEFAULT_RATING_BANDS] == ["Rookie", "Easy", "Medium", "Hard", "Expert", "Master"]
