"""Command line and desktop front ends for HistSift."""
