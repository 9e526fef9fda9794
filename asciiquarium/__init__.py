"""
ASCII Aquarium Simulation

A deterministic, headless aquarium core: fish, schools, large creatures,
bubbles and scenery move in a character grid and are composited into text
frames (plain or colored runs).

Architecture: the simulation state is the source of truth. Terminals,
GUIs and web views are consumers that display the composited frames.
"""

__version__ = "0.1.0"
