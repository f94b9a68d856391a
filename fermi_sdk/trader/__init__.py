"""
Command-line trading entrypoint.

The repo-root `main.py` stays small; the argument parsing and command
implementations live in `fermi_sdk/trader/runner.py`.
"""
