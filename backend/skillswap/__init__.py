"""
SkillSwap backend: peer-to-peer skill exchange API
"""

__version__ = "1.0.0"
