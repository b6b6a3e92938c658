"""
Skill listing types
"""

import enum


class SkillType(str, enum.Enum):
    OFFERING = "offering"
    REQUESTING = "requesting"
