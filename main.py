"""
Formula Student gear ratio optimizer entry point.

Examples:
    python main.py simulate
    python main.py --config configs/fsae_default.yaml optimize --strategy annealing --seed 7
    python main.py compare --quick --parallel
"""

import sys

from fs_gearopt.cli import main

if __name__ == "__main__":
    sys.exit(main())
