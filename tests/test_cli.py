"""Tests for the command-line tools."""

import pandas as pd

from rating_eda.cli import analyze, preprocess


def write_ratings(data_dir):
    """Write a small headerless ratings dump."""
    rows = [
        "i1,u1,5,1000000100",
        "i1,u1,3,1000000000",
        "i2,u1,4,1000000000",
        "i1,u2,4,1000086400",
    ]
    (data_dir / "ratings_Books.csv").write_text("\n".join(rows) + "\n")


class TestPreprocessCli:
    """Test cases for the preprocess CLI."""
    
    def test_writes_enriched_output(self, temp_data_dir, tmp_path):
        """Test a full run writes deduplicated, enriched ratings."""
        write_ratings(temp_data_dir)
        output = tmp_path / "out" / "enriched.parquet"
        
        code = preprocess.main([
            "--data-path", str(temp_data_dir),
            "--offset-seconds", "0",
            "--output", str(output),
        ])
        
        assert code == 0
        df = pd.read_parquet(output)
        assert len(df) == 3
        assert {"user_nth", "item_nth", "day_of_week"}.issubset(df.columns)
    
    def test_offset_from_config(self, temp_data_dir, tmp_path):
        """Test the offset can come from a config file."""
        write_ratings(temp_data_dir)
        config_path = tmp_path / "pipeline.yaml"
        config_path.write_text("pipeline:\n  offset_seconds: 3600\n")
        output = tmp_path / "enriched.csv"
        
        code = preprocess.main([
            "--data-path", str(temp_data_dir),
            "--config", str(config_path),
            "--output", str(output),
        ])
        
        assert code == 0
        assert output.exists()
    
    def test_missing_offset_fails(self, temp_data_dir, tmp_path):
        """Test a run without an offset exits with an error code."""
        write_ratings(temp_data_dir)
        
        code = preprocess.main([
            "--data-path", str(temp_data_dir),
            "--output", str(tmp_path / "enriched.csv"),
        ])
        
        assert code == 1


class TestAnalyzeCli:
    """Test cases for the analyze CLI."""
    
    def test_prints_summary_and_plots(self, temp_data_dir, tmp_path, capsys):
        """Test a detailed run prints summaries and writes charts."""
        write_ratings(temp_data_dir)
        plots_dir = tmp_path / "plots"
        
        code = analyze.main([
            "--data-path", str(temp_data_dir),
            "--offset-seconds", "-25200",
            "--detailed",
            "--plots-dir", str(plots_dir),
        ])
        
        assert code == 0
        out = capsys.readouterr().out
        assert "RATING STATISTICS" in out
        assert "Books" in out
        assert (plots_dir / "user_nth.png").exists()
