"""
Extraction configuration for the chord sheet extractor.

Holds the geometric tolerances and classification thresholds used by every
pipeline stage. Values are plain attributes so callers can override them per
document source.
"""

from typing import Any, Dict, Optional


class ExtractionConfig:
    """Tolerances and thresholds for positional chord sheet extraction"""

    def __init__(self, **overrides: Any):
        # Token merging
        self.merge_gap_min: float = -2.0            # pixels - overlap still counted as adjacent
        self.merge_threshold_factor: float = 0.5    # fraction of average char width
        self.merge_baseline_tolerance: Optional[float] = None  # pixels - same baseline, defaults to y_tolerance

        # Line grouping
        self.y_tolerance: float = 5.0  # pixels

        # Line classification
        self.max_chord_length: int = 15
        self.chord_ratio_threshold: float = 0.7
        self.sparse_chord_ratio_threshold: float = 0.2

        # Couplet pairing
        self.pair_max_distance: float = 30.0  # pixels, exclusive

        # Rendering
        self.lyric_space_factor: float = 0.4  # gap (in char widths) that becomes a space in lyrics
        self.line_space_factor: float = 1.0   # same, for lines rendered on their own

        # PDF fragment splitting
        self.whitespace_split_run: int = 2   # whitespace characters that end a fragment
        self.split_gap_factor: float = 1.5   # gap (in char widths) that ends a fragment

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ValueError(f"Unknown extraction setting: {key}")
            setattr(self, key, value)

    def get_merge_baseline_tolerance(self) -> float:
        """Vertical tolerance for merging fragments into one token"""
        if self.merge_baseline_tolerance is None:
            return self.y_tolerance
        return self.merge_baseline_tolerance

    def get_processing_rules(self) -> Dict[str, Any]:
        """Grouped view of the settings, by pipeline stage"""
        return {
            'token_merging': {
                'gap_min': self.merge_gap_min,
                'threshold_factor': self.merge_threshold_factor,
                'baseline_tolerance': self.get_merge_baseline_tolerance(),
            },
            'line_grouping': {
                'y_tolerance': self.y_tolerance,
            },
            'classification': {
                'max_chord_length': self.max_chord_length,
                'chord_ratio_threshold': self.chord_ratio_threshold,
                'sparse_chord_ratio_threshold': self.sparse_chord_ratio_threshold,
            },
            'pairing': {
                'max_distance': self.pair_max_distance,
            },
            'rendering': {
                'lyric_space_factor': self.lyric_space_factor,
                'line_space_factor': self.line_space_factor,
            },
            'pdf': {
                'whitespace_split_run': self.whitespace_split_run,
                'split_gap_factor': self.split_gap_factor,
            },
        }

    def __repr__(self) -> str:
        settings = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"ExtractionConfig({settings})"
