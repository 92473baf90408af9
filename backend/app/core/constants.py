"""Shared effort-scoring constants.

Centralizes the zone and scoring reference values so stored workout
records stay reproducible when the formulas are touched.
"""

# Upper edges of recovery, fat burn, aerobic and anaerobic as fractions of
# HR max. The max zone runs from the last edge up to HR max itself.
HR_ZONE_FRACTIONS = (0.50, 0.60, 0.70, 0.85)

# Each zone spans this many intensity points (5 zones -> 0..100)
INTENSITY_BAND_WIDTH = 20
INTENSITY_MIN = 0
INTENSITY_MAX = 100

# Duration that earns the full duration score
FULL_DURATION_SECONDS = 3600

# HR standard deviation (bpm) that earns the full variability score
VARIABILITY_REFERENCE_BPM = 30
# Score used when variability cannot be computed (< 2 valid samples)
DEFAULT_VARIABILITY_SCORE = 50

# Expect one spike per this many samples for a full spikes score
SAMPLES_PER_EXPECTED_SPIKE = 10
# Expect one zone change per this many samples for a full transitions score
SAMPLES_PER_EXPECTED_TRANSITION = 5

# Quality bands, checked top down: (minimum score, label)
QUALITY_THRESHOLDS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)
QUALITY_FLOOR = "Poor"

# Age-predicted max heart rate: 220 - age
AGE_PREDICTED_HR_BASE = 220
