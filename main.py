#!/usr/bin/env python
"""
Parallel Image Editor - Root-level launcher
"""

import sys
from pathlib import Path

# Add project root to sys.path so the package is importable without installing
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from parallel_editor.main import main

if __name__ == "__main__":
    sys.exit(main())
