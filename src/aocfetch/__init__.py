"""
aocfetch - Download your personal Advent of Code puzzle inputs.

Pipeline stages:
1. config     - Load persisted defaults (year, session key, output directory)
2. credential - Resolve the session key (flag, config file, Firefox cookie store)
3. fetch      - Validate the day/year and request the puzzle input
4. write      - Save the input as {output}/{year}.{day:02}
"""

__version__ = "1.0.0"
__author__ = "aocfetch team"
