from os import getenv
from pathlib import Path

# oma's user agent, some mirrors rate-limit unknown clients
USER_AGENT = "oma/1.14.514"

DEFAULT_MIRROR = "https://repo.aosc.io/debs"
DEFAULT_BRANCH = "stable"
DEFAULT_TIMEOUT = 30.0

# fixed name of the persisted index inside the download directory
PACKAGES_FILENAME = "Packages"

# default download directory for the command line tool only, the library never reads this
DATA_DIR = Path(getenv("LIBAOSC_DATA_DIR", "data"))
