#!/usr/bin/env python3
"""
Pre-render the product feed into the build output.
Usage: python scripts/prerender_feed.py [--output build/feed.xml]
"""

import sys
from pathlib import Path

# Add parent directory to path to import the service package
sys.path.insert(0, str(Path(__file__).parent.parent))

from sokohub_feed.prerender import main


if __name__ == "__main__":
    sys.exit(main())
