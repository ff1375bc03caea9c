"""
Generals Grid - Three Kingdoms Team Picker

Pick one general per role from a tiered catalog. Each tier may be used
by only one role, and a general's name may appear only once per team.
"""

__version__ = "0.1.0"
