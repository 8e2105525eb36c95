"""
Scenario Configuration

Fault injection scenarios for the headless simulator.
Each scenario is a list of (simulated_time_s, fault_type, intensity) events,
applied in order once the simulated clock passes the event time.

Supply parameters come from src/mains_scope/config.py (global project config).

For real-world mapping:
- motor-start-*: refrigerator / pump startup inrush
- ac-compressor: central A/C compressor kick-in on the 240V leg pair
- neutral-loss: open neutral at the service drop (legs float towards 240V)
"""

SCENARIOS = {
    # Clean supply, no faults
    "clean": [],
    # Single appliance starting on L1
    "motor-start": [
        (0.25, "motor-start-l1", 0.5),
    ],
    # Kitchen evening: fridge, kettle switching, A/C compressor
    "household": [
        (0.20, "motor-start-l1", 0.4),
        (0.60, "resistive-switch-l2", 0.6),
        (1.00, "ac-compressor", 0.5),
        (1.80, "harmonic-distortion", 0.3),
    ],
    # Loose connection arcing on L2
    "arcing": [
        (0.30, "arc-fault-l2", 0.7),
        (0.90, "arc-fault-l2", 0.7),
        (1.50, "arc-fault-240v", 0.5),
    ],
    # Open neutral, most dangerous condition
    "neutral-loss": [
        (0.50, "neutral-loss", 0.5),
    ],
    # Inverter-fed supply misbehaving
    "inverter": [
        (0.20, "mosfet-failure", 0.4),
        (0.50, "dc-injection", 0.3),
        (0.80, "feedback-oscillation", 0.6),
    ],
}


# ============================================================================
# CONFIGURATION PRESETS (pass with --amplitude / --frequency)
# ============================================================================

# # PRESET 1: North American split-phase (default)
# amplitude = 170  # V peak, 120V RMS per leg
# frequency = 60

# # PRESET 2: European single-phase
# amplitude = 230  # shown as "European Standard (230V RMS Single-Phase)"
# frequency = 50
# split phase off (--single-phase)

# # PRESET 3: Floating chassis with DC offset
# --floating --dc-offset 40  # raises a DANGER alert (>30V zero crossing)
