#!/usr/bin/env python3
"""
Creature Battle Arena

Thin entry point for the headless battle driver in ``arena.cli``.

The battle logic lives in the arena package:
- Type chart and effectiveness multiplier
- Turn-based battle state machine
- Local creature catalog and record parsing
- Settings management

To run: python main.py charmander bulbasaur
"""

from arena.cli import main

if __name__ == "__main__":
    main()
