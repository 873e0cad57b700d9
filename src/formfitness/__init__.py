"""
formfitness - reference pose overlay and form matching.
Aligns a "perfect form" skeleton with a live skeleton and scores how well they match.
"""

__version__ = "0.1.0"

# Qt 없이 코어만 사용할 수 있도록 지연 import
_EXPORTS = {
    "Joint": ".models",
    "JointPoint": ".models",
    "Skeleton": ".models",
    "ReferencePose": ".models",
    "PixelBuffer": ".models",
    "Orientation": ".models",
    "Point": ".models",
    "Size": ".models",
    "Rgb": ".models",
    "LIMB_CONNECTIONS": ".constants",
    "ReferencePoseRepository": ".repository",
    "AlignmentEngine": ".alignment",
    "AlignmentConfig": ".alignment",
    "AlignmentMode": ".alignment",
    "match_percentage": ".scoring",
    "color_for_match": ".scoring",
    "score_frame": ".scoring",
    "CoachingSession": ".session",
    "OpenPoseJsonDetector": ".detector",
    "ExerciseStore": ".exercises",
    "FormFitnessWindow": ".app",
}


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module
        module = import_module(_EXPORTS[name], __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS) + ["__version__"]


def main():
    """Entry point for the application."""
    from .app import run_app
    run_app()
