#!/usr/bin/env python3
"""
Split-Phase Mains Scope Simulator

Drives a simulation session in real time (~60 ticks/s), injects faults from
the command line or a scenario in scenario_config.py, and prints status lines
with the running voltage statistics.

Usage:
    python run_scope_simulator.py --duration 5
    python run_scope_simulator.py --scenario household --speed 0.1 --plot
    python run_scope_simulator.py --fault neutral-loss --intensity 0.5
"""

import argparse
import logging
import time

from mains_scope.analytics import (
    calculate_readouts,
    measure_window,
    plot_scope_window,
    plot_transient_history,
    safety_alerts,
)
from mains_scope.config import DISPLAY, MAINS, TRIGGER
from mains_scope.engine import FaultType, SimulationParameters, TriggerMode
from mains_scope.scripts.scenario_config import SCENARIOS
from mains_scope.session import SimulationSession
from mains_scope.utils import calculate_stats


class ScopeSimulator:
    """Runs a SimulationSession against the wall clock"""

    FRAME_INTERVAL = DISPLAY["frame_interval"]
    STATUS_EVERY = 60  # ticks (~1 second)

    def __init__(self, session: SimulationSession, scenario: list | None = None):
        self.session = session
        self.pending = sorted(scenario or [], key=lambda event: event[0])
        self.start_time = None

    def apply_scenario(self):
        """Trigger every scenario event whose time has passed"""
        while self.pending and self.pending[0][0] <= self.session.time:
            _, fault_type, intensity = self.pending.pop(0)
            self.session.set_fault_intensity(intensity)
            fault_id = self.session.trigger_fault(fault_type)
            if fault_id is not None:
                print(f"  t={self.session.time:7.3f}s  Fault {fault_id}: {fault_type}")

    def print_status(self):
        session = self.session
        stats = session.get_statistics_snapshot()
        window = calculate_stats(session.sample_window().samples)
        print(
            f"Ticks: {session.tick_count:5d}, "
            f"t={session.time:7.3f}s, "
            f"Faults: {len(session.registry)}, "
            f"RMS={session.statistics.last_rms:6.1f}V, "
            f"Vpp={window['peak_to_peak']:6.1f}V, "
            f"peak=[{stats.peak_low:7.1f}, {stats.peak_high:7.1f}]V"
        )

    def run(self, duration: float | None = None):
        self.start_time = time.monotonic()

        try:
            while True:
                now = time.monotonic()
                self.apply_scenario()
                self.session.tick(now)

                if self.session.tick_count % self.STATUS_EVERY == 0:
                    self.print_status()

                if duration and (now - self.start_time) >= duration:
                    break

                time.sleep(self.FRAME_INTERVAL)

        except KeyboardInterrupt:
            print("\nStopped by user")

        finally:
            self.print_summary()

    def print_summary(self):
        if self.start_time is None:
            return

        session = self.session
        elapsed = time.monotonic() - self.start_time
        stats = session.get_statistics_snapshot()
        history = session.get_transient_history()
        events = session.statistics.events(history)
        readouts = calculate_readouts(session.params, session.time, session.speed)
        measured = measure_window(session.sample_window(), session.params.frequency)

        print("\n" + "=" * 60)
        print("Summary:")
        print(f"  Ticks: {session.tick_count}")
        print(f"  Duration: {elapsed:.1f}s wall, {session.time:.3f}s simulated")
        if elapsed > 0:
            print(f"  Tick rate: {session.tick_count / elapsed:.1f} ticks/s")
        print(f"  Peak-to-peak: {readouts['peak_to_peak']:.0f} V")
        print(f"  RMS voltage: {readouts['rms_voltage']:.1f} V")
        print(f"  Zero crossing: {readouts['zero_crossing']:g} V")
        print(f"  Standard: {readouts['voltage_standard']}")
        print(f"  Peak high: {stats.peak_high:.1f} V at t={stats.peak_high_time:.3f}s")
        print(f"  Peak low: {stats.peak_low:.1f} V at t={stats.peak_low_time:.3f}s")
        print(f"  RMS range: {stats.min_rms:.1f} - {stats.max_rms:.1f} V")
        print(f"  Measured L1 window: {measured['true_rms']:.1f} V RMS, THD {measured['thd'] * 100:.2f}%")
        print(f"  Transient samples: {len(history)} ({len(events)} sag/swell)")
        for fault in session.active_faults():
            print(f"  Active: {fault['name']} [{fault['status']}]")
        for alert in safety_alerts(session.params, session.registry):
            print(f"  {alert['severity'].upper()}: {alert['message']}")
        print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Split-phase mains scope simulator - scenarios in scenario_config.py",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Fault types: {', '.join(f.value for f in FaultType)}",
    )

    parser.add_argument("--duration", type=float, default=5.0, help="Duration in seconds (0 = infinite)")
    parser.add_argument("--speed", type=float, default=1.0, help="Simulation speed (max 1.0)")
    parser.add_argument("--frequency", type=float, default=MAINS["frequency"], help="Mains frequency (Hz)")
    parser.add_argument("--amplitude", type=float, default=MAINS["amplitude"], help="Peak voltage (V)")
    parser.add_argument("--dc-offset", type=float, default=MAINS["dc_offset"], help="DC offset (V)")
    parser.add_argument("--floating", action="store_true", help="Float the chassis (DC offset applies)")
    parser.add_argument("--single-phase", action="store_true", help="Disable the L2 leg")
    parser.add_argument(
        "--trigger",
        choices=[mode.value for mode in TriggerMode],
        default=TRIGGER["mode"],
        help="Trigger mode",
    )
    parser.add_argument("--level", type=float, default=None, help="Trigger voltage (V)")
    parser.add_argument(
        "--fault", action="append", default=[], help="Fault type to inject at start (repeatable)"
    )
    parser.add_argument("--intensity", type=float, default=0.5, help="Fault intensity (0-1)")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), help="Fault scenario to replay")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for noisy faults")
    parser.add_argument("--plot", action="store_true", help="Show plotly figures at the end")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    params = SimulationParameters(
        frequency=args.frequency,
        amplitude=args.amplitude,
        dc_offset=args.dc_offset,
        chassis_grounded=not args.floating,
        split_phase_mode=not args.single_phase,
    )
    session = SimulationSession(params, seed=args.seed)
    session.set_speed(args.speed)
    session.set_trigger_config(args.trigger, args.level)
    session.set_fault_intensity(args.intensity)

    scenario = [(0.0, fault, args.intensity) for fault in args.fault]
    if args.scenario:
        scenario += SCENARIOS[args.scenario]

    print("\n" + "=" * 60)
    print("Split-Phase Mains Scope Simulator")
    print("=" * 60)
    print(f"  Supply: {params.amplitude:g} V peak @ {params.frequency:g} Hz")
    print(f"  Legs: {'L1 + L2 (split-phase)' if params.split_phase_mode else 'L1 only'}")
    print(f"  Chassis: {'Bonded' if params.chassis_grounded else f'Floating ({params.dc_offset:g} V offset)'}")
    print(f"  Speed: {session.speed:.3f}x, trigger: {args.trigger}")
    print(f"  Scenario: {args.scenario or 'none'} ({len(scenario)} fault event(s))")
    print("Press Ctrl+C to stop")
    print("=" * 60 + "\n")

    simulator = ScopeSimulator(session, scenario)
    simulator.run(args.duration or None)

    if args.plot:
        trail = [session.sample_window(t) for t in list(session.trail)[-20:]]
        plot_scope_window(
            session.sample_legs(), session.params.effective_offset, trail=trail, show=True
        )
        plot_transient_history(session.get_transient_history(), show=True)


if __name__ == "__main__":
    main()
