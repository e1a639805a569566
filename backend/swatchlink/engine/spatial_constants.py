"""Shared spatial constants for container resolution and swatch detection.

All distances are in px-equivalent units of the snapshot's coordinate space.
"""

# Image-like elements at least this size on both axes count as product images.
LARGE_IMAGE_MIN_SIZE = 100.0

# Swatch-sized elements: visible hit targets between these bounds.
SWATCH_MIN_SIZE = 10.0
SWATCH_MAX_SIZE = 150.0

# Elements smaller than this are ignored when gathering clustering candidates.
MIN_CANDIDATE_SIZE = 10.0

# Shared-edge tolerance when banding boxes into grid rows/columns.
GRID_BAND_TOLERANCE = 5.0

# Layout tier: swatch rows.
ROW_BAND_TOLERANCE = 10.0
ROW_MIN_SWATCHES = 3
ROW_SIZE_TOLERANCE = 5.0
ROW_MIN_ASPECT = 0.8
ROW_MAX_ASPECT = 1.2
ROW_IMAGE_MIN_SIZE = 10.0
ROW_IMAGE_MAX_SIZE = 100.0

# Layout tier: proximity window around the product image.
LAYOUT_MAX_VERTICAL_GAP = 150.0
LAYOUT_VERTICAL_HEIGHT_FRACTION = 0.5
LAYOUT_HORIZONTAL_TOLERANCE = 50.0
LAYOUT_SAME_LEVEL_TOLERANCE = 50.0

# Clustering phase: tighter retry radius as a fraction of detected grid spacing.
GRID_SPACING_RADIUS_FRACTION = 0.9

# Visual style tier: borders wider than this mark a selection.
SELECTED_BORDER_MIN_WIDTH = 1.0
