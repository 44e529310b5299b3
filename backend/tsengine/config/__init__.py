from .presets import (
    CUSTOM,
    CUSTOM_PRESET,
    DEFAULT_PRESET,
    PRESETS,
    PresetDefinition,
    available_resolutions,
    default_resolution,
    get_preset,
    preset_keys,
)
