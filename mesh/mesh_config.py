"""Configuration for extrusion and sweep meshing."""

# Boolean backend handed to trimesh.boolean (manifold3d)
BOOLEAN_ENGINE = "manifold"

# Geometry tolerances
AREA_EPS = 1e-12
CROSS_EPS = 1e-9
EAR_CLIP_GUARD = 5000

# Sweep sampling: first sample is offset from t=0 and the last one stops short
# of t=1 so the finite difference between samples never has zero length.
FIRST_SAMPLE_OFFSET = 0.01
LAST_SAMPLE_T = 0.99999

DEFAULT_SLICES = 10
DEFAULT_REVOLVE_DEGREES = 360.0
