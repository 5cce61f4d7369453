# WSGI entry point for the car rental API

import os

# Load environment variables from .env file if present, before settings are read
from dotenv import load_dotenv
env_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

from carrental.main import create_app

application = create_app()
