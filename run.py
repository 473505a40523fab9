#!/usr/bin/env python3
"""
CLI entry point for the StayNest marketplace.
"""
from staynest.main import main

if __name__ == "__main__":
    main()
