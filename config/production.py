import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

# Workers use their own short-lived DB connections.
GENERATOR_MAX_WORKERS = int(os.getenv("GENERATOR_MAX_WORKERS", "4"))
