from __future__ import annotations

import sys

from dotenv import load_dotenv

load_dotenv()

from infrastructure.settings import configure_logging, get_settings

configure_logging(get_settings())

from interface.api import app  # noqa: E402,F401
from interface.cli import main as cli_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(cli_main())
