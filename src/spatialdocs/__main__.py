"""Run with: python -m spatialdocs"""
from spatialdocs.main import main

if __name__ == "__main__":
    main()
