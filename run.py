"""
Application Runner

This script is the entry point for running the label bot.
Use: python run.py --event-name pull_request --payload event.json
"""

import sys
from pathlib import Path

# Add project root to Python path to enable 'labelbot' module imports
project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root))

from labelbot.main import main


if __name__ == "__main__":
    sys.exit(main())
