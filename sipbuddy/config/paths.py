import os

# sipbuddy/config/paths.py

# CONFIG_DIR = .../sipbuddy/config  → sipbuddy  → project root
CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))      # .../sipbuddy/config
PACKAGE_DIR = os.path.dirname(CONFIG_DIR)                    # .../sipbuddy
PROJECT_ROOT = os.path.dirname(PACKAGE_DIR)

DATA_DIR = os.path.join(PROJECT_ROOT, "data")

PRODUCTS_FEED_PATH = os.path.join(DATA_DIR, "products.csv")
DEPARTMENT_FEED_PATH = os.path.join(DATA_DIR, "department_feed.txt")
SETTINGS_DB_PATH = os.path.join(DATA_DIR, "sipbuddy.db")
