from .bird_model import (
    BirdInputs,
    BirdResult,
    BirdTransmittances,
    InvalidParameterError,
    bird_clear_sky,
    compute_bird,
    validate_bird_inputs,
)
from .bird_series import add_bird_clear_sky_columns, bird_clear_sky_frame

__all__ = [
    "BirdInputs",
    "BirdResult",
    "BirdTransmittances",
    "InvalidParameterError",
    "bird_clear_sky",
    "compute_bird",
    "validate_bird_inputs",
    "add_bird_clear_sky_columns",
    "bird_clear_sky_frame",
]
