# Global simulation configuration shared across the engine, session and scripts
# Adjust these values to change the defaults the session starts with

MAINS = {
    "frequency": 60.0,  # Hz (North American mains)
    "amplitude": 170.0,  # V peak (340V peak-to-peak, 120V RMS)
    "dc_offset": 0.0,  # V (only visible when the chassis is floating)
    "chassis_grounded": True,  # Bonded chassis removes the DC offset
    "split_phase_mode": True,  # Model L2 as L1 shifted by 180°
}

# Floors and ceilings applied instead of raising on bad slider values
LIMITS = {
    "min_frequency": 0.1,  # Hz
    "min_amplitude": 0.001,  # V
    "min_speed": 0.001,  # x real time
    "max_speed": 1.0,  # x real time
}

FAULTS = {
    "default_intensity": 0.5,  # 0.0-1.0 scale applied to newly triggered faults
}

TRIGGER = {
    "mode": "auto",  # "none", "auto" or "manual"
    "level": 0.0,  # V (auto mode)
    "manual_voltage": 0.0,  # V (manual mode)
    "cycles_displayed": 4,  # Time window always spans 4 cycles
}

SAMPLER = {
    "viewport_width": 800,  # px (one sample per pixel at 1x)
    "sample_budget": 2000,  # Samples per window at 1x, scaled by 1/speed
    "max_samples": 20000,  # Hard ceiling regardless of speed
    # (lower speed bound, resolution multiplier), checked top to bottom
    "resolution_steps": [
        (0.5, 1),
        (0.1, 2),
        (0.01, 5),
        (0.0, 10),
    ],
}

STATISTICS = {
    "history_capacity": 1000,  # Transient samples kept (oldest evicted)
    "record_interval": 0.016,  # s wall-clock between transient samples (~60 FPS)
    "nominal_rms_reference": 120.0,  # V RMS fixed power-quality reference
    "sag_threshold": 0.9,  # Fraction of reference below which a sample is a sag
    "swell_threshold": 1.1,  # Fraction of reference above which a sample is a swell
    "peak_limit": 1.5,  # x amplitude, acceptance window without arcing
    "arc_peak_limit": 1.8,  # x amplitude, minimum candidate while arcing
    "rms_band": (0.5, 1.5),  # x nominal RMS allowed to update the extrema
    "rms_floor": 0.3,  # x nominal RMS lower bound of the estimate
}

DISPLAY = {
    "frame_interval": 0.016,  # s (~60 FPS)
    "trail_length": 400,  # Historical frames kept for the trail effect
}

# Amplitude (V peak) -> voltage standard label
VOLTAGE_STANDARDS = {
    170: "North American Standard (120V RMS Split-Phase)",
    155: "European Standard (110V RMS Single-Phase)",
    230: "European Standard (230V RMS Single-Phase)",
}

SPEED_PRESETS = {
    "ultra-slow": 0.01,
    "slow": 0.1,
    "normal": 1.0,
}
