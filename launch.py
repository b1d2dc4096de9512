#!/usr/bin/env python3
"""
fleetbot Launcher - Run a simulated fleet with the robot controller

Usage:
    python launch.py                              # 4 robots swapping places on a circle
    python launch.py --robots 6 --radius 4        # Bigger swap scenario
    python launch.py --waypoints "0,0;5,0;5,5"    # Single robot along a path
    python launch.py --dropout 0:2.0:1.5          # Robot 0 loses its sensor at 2s for 1.5s
"""

import sys
import argparse
import asyncio
import logging
import math
from typing import Dict, List, Optional, Tuple

from controller.avoidance import AvoidanceType, create_avoidance
from controller.fleet import FleetMonitor
from controller.maze import OpenSpace, WallMap
from controller.robot_controller import RobotController
from controller.transport import InMemoryStateBus
from controller.types import AvoidanceConfig, ControllerConfig, Destination, Location
from fleet_config import FleetConfig
from sim import SimulatedRobot


logger = logging.getLogger("launch")


def setup_logging(level: str = "INFO") -> None:
    """Configure logging"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def parse_waypoints(text: str, margin: float) -> List[Destination]:
    """Parse "x,y;x,y;..." into destinations, the last one marked final"""
    points = [p.strip() for p in text.split(";") if p.strip()]
    destinations = []
    for i, point in enumerate(points):
        x, y = (float(v) for v in point.split(","))
        destinations.append(
            Destination(x=x, y=y, margin=margin, is_final=(i == len(points) - 1))
        )
    return destinations


def parse_walls(text: str) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Parse "x1,y1,x2,y2;..." into wall segments"""
    walls = []
    for segment in (s.strip() for s in text.split(";")):
        if not segment:
            continue
        x1, y1, x2, y2 = (float(v) for v in segment.split(","))
        walls.append(((x1, y1), (x2, y2)))
    return walls


def swap_paths(robots: int, radius: float, margin: float) -> List[List[Destination]]:
    """Robots evenly spaced on a circle, each driving to the opposite point"""
    paths = []
    for i in range(robots):
        angle = 2.0 * math.pi * i / robots
        start = Destination(x=radius * math.cos(angle), y=radius * math.sin(angle), margin=margin)
        goal = Destination(x=-start.x, y=-start.y, margin=margin, is_final=True)
        paths.append([start, goal])
    return paths


async def run_fleet(
    paths: List[List[Destination]],
    controller_config: ControllerConfig,
    avoidance_type: AvoidanceType,
    avoidance_config: AvoidanceConfig,
    walls: Optional[list] = None,
    sim_step: float = 0.05,
    timeout: float = 60.0,
    dropout: Optional[Tuple[int, float, float]] = None,
) -> FleetMonitor:
    """
    Run one controller per path against simulated robots.

    Returns:
        The fleet monitor with every robot's reports
    """
    bus = InMemoryStateBus()
    monitor = FleetMonitor()
    visibility = WallMap(walls) if walls else OpenSpace()

    robots: Dict[int, SimulatedRobot] = {}
    controllers: List[RobotController] = []
    for robot_id, path in enumerate(paths):
        start, first = path[0], path[1]
        heading = math.atan2(first.y - start.y, first.x - start.x)
        robot = SimulatedRobot(Location(start.x, start.y, heading), wheel_base=controller_config.wheel_base)
        robots[robot_id] = robot
        controllers.append(RobotController(
            robot_id=robot_id,
            destinations=path,
            robot=robot,
            visibility=visibility,
            avoidance=create_avoidance(avoidance_type, robot_id, visibility, avoidance_config),
            state_channel=bus,
            manager=monitor,
            config=controller_config,
        ))

    async def simulate() -> None:
        while True:
            for robot in robots.values():
                robot.step(sim_step)
            await asyncio.sleep(sim_step)

    async def sensor_dropout(robot_id: int, at: float, duration: float) -> None:
        await asyncio.sleep(at)
        logger.info(f"Robot {robot_id}: sensor failure injected")
        robots[robot_id].fail_sensor()
        await asyncio.sleep(duration)
        robots[robot_id].restore_sensor()
        logger.info(f"Robot {robot_id}: sensor restored")

    helpers = [asyncio.create_task(simulate())]
    if dropout is not None:
        helpers.append(asyncio.create_task(sensor_dropout(*dropout)))

    try:
        await asyncio.wait_for(
            asyncio.gather(*(c.run() for c in controllers)),
            timeout=timeout
        )
    except asyncio.TimeoutError:
        unfinished = [c.robot_id for c in controllers if c.is_running]
        logger.warning(f"Timeout after {timeout}s, robots still running: {unfinished}")
    finally:
        for task in helpers:
            task.cancel()

    for robot_id, robot in robots.items():
        pose = robot.pose
        logger.info(
            f"Robot {robot_id}: final pose ({pose.x:.2f}, {pose.y:.2f}), "
            f"ticks={monitor.finish_ticks(robot_id)}, "
            f"avoidance interventions={monitor.collision_count(robot_id)}"
        )
    return monitor


def parse_dropout(text: str) -> Tuple[int, float, float]:
    """Parse "robot:at:duration" """
    robot_id, at, duration = text.split(":")
    return int(robot_id), float(at), float(duration)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="fleetbot - Simulated multi-robot waypoint control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py                            Swap scenario with 4 robots
  python launch.py --waypoints "0,0;5,0;5,5"  Single robot along a path
  python launch.py --walls "2,-1,2,1"         Add a wall segment
        """
    )

    parser.add_argument("--robots", type=int, default=4,
                        help="Number of robots in the swap scenario")
    parser.add_argument("--radius", type=float, default=3.0,
                        help="Circle radius of the swap scenario (m)")
    parser.add_argument("--waypoints",
                        help="Single robot path as \"x,y;x,y;...\" (first point is the start)")
    parser.add_argument("--margin", type=float, default=0.2,
                        help="Arrival margin of every waypoint (m)")
    parser.add_argument("--walls", default="",
                        help="Wall segments as \"x1,y1,x2,y2;...\"")
    parser.add_argument("--avoidance", choices=[t.value for t in AvoidanceType],
                        help="Avoidance strategy (default: from configuration)")
    parser.add_argument("--dropout", type=parse_dropout,
                        help="Inject a sensor failure as \"robot:at:duration\" (seconds)")
    parser.add_argument("--sim-step", type=float, default=0.05,
                        help="Simulation step (s)")
    parser.add_argument("--timeout", type=float, default=60.0,
                        help="Give up after this many seconds")
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)

    config = FleetConfig(args.env_file)
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            print(f"Configuration error: {error}")
        sys.exit(1)

    if args.waypoints:
        paths = [parse_waypoints(args.waypoints, args.margin)]
        if len(paths[0]) < 2:
            print("Error: a path needs a start point and at least one waypoint")
            sys.exit(1)
    else:
        paths = swap_paths(args.robots, args.radius, args.margin)

    avoidance_type = AvoidanceType(args.avoidance) if args.avoidance else config.avoidance_type

    try:
        monitor = asyncio.run(run_fleet(
            paths,
            controller_config=config.to_controller_config(),
            avoidance_type=avoidance_type,
            avoidance_config=config.to_avoidance_config(),
            walls=parse_walls(args.walls),
            sim_step=args.sim_step,
            timeout=args.timeout,
            dropout=args.dropout,
        ))
    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(1)

    if not monitor.all_finished(range(len(paths))):
        sys.exit(2)


if __name__ == "__main__":
    main()
