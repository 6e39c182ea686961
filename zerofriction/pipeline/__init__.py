"""Console output helpers shared by zf commands."""
