"""
reset_data.py
-------------
Utility script to clear all stored data (users, tools, bookings) from the local data file.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from loguru import logger

from agrirent.config import Config
from agrirent.models.store import Store


def main():
    """Empty the store at the configured DATA_PATH and write it back."""
    store = Store.instance(Config.DATA_PATH)
    store.clear()

    logger.info("{} has been cleared.", store.path)
    logger.info("Tip: run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
