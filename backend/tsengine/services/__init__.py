from .generator import value
from .bucketing import (
    AggregationResult,
    Bucket,
    QueryWindow,
    TimePoint,
    aggregate,
    aggregate_points,
    align_window,
    locate_bucket,
    run_query,
    sample_hourly,
    validate_request,
)
from .ranges import (
    Window,
    compute_range_from_custom,
    compute_range_from_preset,
    recenter_custom_bounds,
    step_custom_bounds,
    step_preset_anchor,
)
from .navigation import (
    NavigationState,
    apply_custom,
    change_resolution,
    ensure_default,
    from_params,
    initial_state,
    jump_to_today,
    select_preset,
    step,
    to_params,
)
