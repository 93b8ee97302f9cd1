"""
Story Script Parser Package

Parses a line-oriented interactive narrative script (knots, stitches,
choices, gathers, conditional text, sequences, jumps, declarations)
into a plain Document tree.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Expression evaluation
    - Jump address resolution
    - Random or cyclic selection of sequence alternatives
    - Merging of included files

All of that is the playback runtime's job.
The runtime consumes the Document unchanged.
"""

__version__ = "0.1.0"
