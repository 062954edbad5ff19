from .projection_scenario import ProjectionScenario

__all__ = [
    "ProjectionScenario",
]
