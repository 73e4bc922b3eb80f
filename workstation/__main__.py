#!/usr/bin/env python3
"""
Workstation module entry point
Allows running: python3 -m workstation
"""

from workstation.cli import entrypoint

if __name__ == '__main__':
    entrypoint()
