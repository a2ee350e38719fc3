"""Source handling: normalization, validation and live link checks."""
