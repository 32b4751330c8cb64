"""Construction algorithms for resource-constrained project scheduling.

Contains:
- GRASP activity-list construction with a restricted candidate list
"""

from rcpsp_grasp.algorithms.grasp import construct_sequence, grasp_schedule

__all__ = ["construct_sequence", "grasp_schedule"]
