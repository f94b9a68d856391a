"""
`python main.py <command>` from a source checkout.

Reads `config/secrets.env` (FERMI_SECRET_KEY and friends) into the environment
before handing over to the `fermi-trade` CLI in `fermi_sdk/trader/runner.py`.
Installed copies use the `fermi-trade` console script instead.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

SECRETS_ENV = Path(__file__).resolve().parent / "config" / "secrets.env"


def main() -> None:
    # Values already exported in the shell win over the file.
    if SECRETS_ENV.exists():
        load_dotenv(SECRETS_ENV, override=False)

    from fermi_sdk.trader.runner import main as run_cli

    run_cli()


if __name__ == "__main__":
    main()
