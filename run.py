"""
Entry Point Script (Bootstrap)
==============================
Development runner that lives outside the 'src' package.

It puts 'src' on sys.path so 'spatialdocs' imports resolve without an
editable install, and gives the process its own taskbar identity on Windows.

Usage:
    $ python run.py
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

appid = 'SpatialDocs.Board'  # Arbitrary string
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    # Not on Windows or ctypes not available
    pass

from spatialdocs.main import main

if __name__ == "__main__":
    main()
