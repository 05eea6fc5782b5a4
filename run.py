"""
Entry Point Script (Bootstrap)
==============================
Runs the pipeline from a source checkout without installing the package.

Why is this file needed?
------------------------
It is located outside the 'src' package and modifies 'sys.path' so Python
can resolve imports like 'from sparseconv.model...' without an install.

Usage:
    $ python run.py image.png --output-dir out
"""
import os
import sys

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from sparseconv.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
