#!/usr/bin/env python3
"""
Fleet Environment Configuration Helper

Provides easy access to .env configuration for the fleet controller.
Automatically loads .env file and provides defaults.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from controller.avoidance import AvoidanceType
from controller.types import AvoidanceConfig, ControllerConfig


class FleetConfig:
    """Configuration manager for fleet controllers"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (default: .env in current directory)
        """
        env_path = Path(env_file) if env_file is not None else Path(".env")
        self._loaded = False
        if env_path.exists():
            load_dotenv(env_path)
            self._loaded = True

    @staticmethod
    def _float(name: str, default: float) -> float:
        return float(os.getenv(name, str(default)))

    @property
    def control_period_ms(self) -> float:
        """Control tick period in milliseconds (default: 200)"""
        return self._float("FLEET_CONTROL_PERIOD_MS", 200.0)

    @property
    def watchdog_factor(self) -> float:
        """Watchdog period as multiple of control period (default: 1.5)"""
        return self._float("FLEET_WATCHDOG_FACTOR", 1.5)

    @property
    def preferred_speed(self) -> float:
        """Preferred cruise speed in m/s (default: 0.4)"""
        return self._float("FLEET_PREF_SPEED", 0.4)

    @property
    def max_speed(self) -> float:
        """Maximum robot speed in m/s (default: 0.8)"""
        return self._float("FLEET_MAX_SPEED", 0.8)

    @property
    def angular_gain(self) -> float:
        """Angular velocity per radian of heading error (default: 1.2)"""
        return self._float("FLEET_ANGULAR_GAIN", 1.2)

    @property
    def wheel_base(self) -> float:
        """Distance between wheels in m (default: 0.3)"""
        return self._float("FLEET_WHEEL_BASE", 0.3)

    @property
    def avoidance(self) -> str:
        """Avoidance strategy name (default: give_way)"""
        return os.getenv("FLEET_AVOIDANCE", AvoidanceType.GIVE_WAY.value)

    @property
    def safety_radius(self) -> float:
        """Minimum gap to other robots in m (default: 0.5)"""
        return self._float("FLEET_SAFETY_RADIUS", 0.5)

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        numeric = [
            ("FLEET_CONTROL_PERIOD_MS", lambda: self.control_period_ms),
            ("FLEET_WATCHDOG_FACTOR", lambda: self.watchdog_factor),
            ("FLEET_PREF_SPEED", lambda: self.preferred_speed),
            ("FLEET_MAX_SPEED", lambda: self.max_speed),
            ("FLEET_ANGULAR_GAIN", lambda: self.angular_gain),
            ("FLEET_WHEEL_BASE", lambda: self.wheel_base),
            ("FLEET_SAFETY_RADIUS", lambda: self.safety_radius),
        ]
        values = {}
        for name, read in numeric:
            try:
                values[name] = read()
            except ValueError:
                errors.append(f"{name} is not a number")

        for name in ("FLEET_CONTROL_PERIOD_MS", "FLEET_WATCHDOG_FACTOR", "FLEET_MAX_SPEED", "FLEET_WHEEL_BASE",
                     "FLEET_SAFETY_RADIUS"):
            if name in values and values[name] <= 0:
                errors.append(f"{name} must be positive")

        if "FLEET_PREF_SPEED" in values and values["FLEET_PREF_SPEED"] < 0:
            errors.append("FLEET_PREF_SPEED must not be negative")

        known = [t.value for t in AvoidanceType]
        if self.avoidance not in known:
            errors.append(f"FLEET_AVOIDANCE must be one of {', '.join(known)}")

        return len(errors) == 0, errors

    def to_controller_config(self) -> ControllerConfig:
        """Build a ControllerConfig from the environment"""
        return ControllerConfig(
            control_period=self.control_period_ms / 1000.0,
            watchdog_factor=self.watchdog_factor,
            preferred_speed=self.preferred_speed,
            max_speed=self.max_speed,
            angular_gain=self.angular_gain,
            wheel_base=self.wheel_base,
        )

    def to_avoidance_config(self) -> AvoidanceConfig:
        return AvoidanceConfig(safety_radius=self.safety_radius)

    @property
    def avoidance_type(self) -> AvoidanceType:
        return AvoidanceType(self.avoidance)

    def print_status(self):
        """Print configuration status"""
        print("Fleet Configuration Status:")
        print(f"  .env loaded:     {'Yes' if self._loaded else 'No'}")

        is_valid, errors = self.validate()
        if is_valid:
            print(f"  Control period:  {self.control_period_ms:.0f} ms")
            print(f"  Watchdog factor: {self.watchdog_factor}")
            print(f"  Preferred speed: {self.preferred_speed} m/s")
            print(f"  Max speed:       {self.max_speed} m/s")
            print(f"  Angular gain:    {self.angular_gain}")
            print(f"  Wheel base:      {self.wheel_base} m")
            print(f"  Avoidance:       {self.avoidance}")
            print(f"  Safety radius:   {self.safety_radius} m")
            print("\n  Status: Configuration is valid")
        else:
            print("\n  Status: Configuration has errors:")
            for error in errors:
                print(f"    - {error}")


# Global config instance
_config = None

def get_config(reload: bool = False) -> FleetConfig:
    """
    Get the global configuration instance

    Args:
        reload: Force reload of .env file

    Returns:
        FleetConfig instance
    """
    global _config
    if _config is None or reload:
        _config = FleetConfig()
    return _config


def main():
    """Command-line utility to check configuration"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Fleet Configuration Utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Check current configuration:
    python fleet_config.py

  Validate configuration:
    python fleet_config.py --validate

  Use custom .env file:
    python fleet_config.py --env-file /path/to/.env
        """
    )

    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--validate", action="store_true",
                       help="Validate configuration and exit with error if invalid")

    args = parser.parse_args()

    config = FleetConfig(args.env_file)
    config.print_status()

    if args.validate:
        is_valid, errors = config.validate()
        if not is_valid:
            print("\nValidation failed!")
            sys.exit(1)
        else:
            print("\nValidation passed!")


if __name__ == "__main__":
    main()
