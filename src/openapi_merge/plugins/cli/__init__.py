"""CLI commands; every module exposing a top-level ``cli`` command is loaded."""
