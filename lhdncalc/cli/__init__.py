"""LHDN Calc command-line interface."""
