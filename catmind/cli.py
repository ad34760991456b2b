"""Command-line interface for the catmind project."""

import argparse
import logging
import random
import time
from typing import List, Optional

from catmind.config import load_config, Config
from catmind.core.behavior_config import get_default_behavior_config, load_behavior_config
from catmind.core.time_manager import GameTimeManager, ManualClock
from catmind.game.play_scene import PlayScene
from catmind.mind.actions import validate_action_coverage
from catmind.mind.cat_core import Cat, DEFAULT_CAT_NAME
from catmind.mind.probability import ActionProbabilityCalculator
from catmind.tools.computation_graph import ComputationGraph

logger = logging.getLogger("catmind.cli")

def build_scene(config: Config, name: str, state_path: Optional[str] = None,
                clock: Optional[ManualClock] = None) -> PlayScene:
    """Create the cat and its scene from configuration."""
    behavior = load_behavior_config(config.behavior.path) if config.behavior.path else get_default_behavior_config()
    validate_action_coverage(behavior)

    rng = random.Random(config.simulation.seed)
    time_manager = GameTimeManager(clock)
    time_manager.set_time_scale(config.simulation.time_scale)
    calculator = ActionProbabilityCalculator(behavior, rng=rng)

    cat = None
    if state_path:
        cat = Cat.load_state(state_path, name, time_manager, calculator=calculator, rng=rng)
    if cat is None:
        cat = Cat.create_default(time_manager, name=name, calculator=calculator, rng=rng)

    return PlayScene(cat, time_manager, arena=config.arena)

def _report(scene: PlayScene, last_action: Optional[str]) -> Optional[str]:
    action = scene.cat.get_current_action()
    name = action.name if action else None
    if name != last_action:
        state = scene.cat.get_internal_state()
        seconds = scene.time_manager.get_total_time() / 1000
        print(f"[{seconds:7.2f}s] {scene.cat.name} -> {name} "
              f"(bonding {state.bonding:+.2f}, playfulness {state.playfulness:+.2f}, "
              f"fear {state.fear:+.2f}, hearts {scene.cat.get_bonding_level()}/10)")
    return name

def run(config_path: Optional[str] = None, seconds: Optional[float] = None,
        toy: Optional[List[float]] = None, state_path: Optional[str] = None,
        save_path: Optional[str] = None, name: str = DEFAULT_CAT_NAME,
        seed: Optional[int] = None) -> None:
    """Run the play scene headless."""
    # Load configuration
    config = load_config(config_path) if config_path else Config()
    if seed is not None:
        config.simulation.seed = seed

    # Configure logging
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    clock = ManualClock() if seconds is not None else None
    scene = build_scene(config, name, state_path, clock)
    if toy:
        scene.place_toy(toy[0], toy[1])

    frame_ms = config.simulation.step_interval * 1000
    last_action = None

    try:
        print(f"🐈 {scene.cat.name} enters the room...")
        if clock is not None:
            # Simulated time: advance the clock one frame at a time
            while scene.time_manager.get_total_time() < seconds * 1000:
                clock.advance(frame_ms)
                scene.step()
                last_action = _report(scene, last_action)
        else:
            print("Press Ctrl+C to stop")
            while True:
                scene.step()
                last_action = _report(scene, last_action)
                time.sleep(config.simulation.step_interval)

    except KeyboardInterrupt:
        print("\nStopping simulation...")

    finally:
        if save_path:
            scene.cat.save_state(save_path)

def graph(config_path: Optional[str] = None, output: Optional[str] = None) -> None:
    """Write the computation graph of the behavior configuration."""
    behavior = load_behavior_config(config_path)
    markdown = ComputationGraph(behavior).render_markdown()

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(markdown)
        print(f"Computation graph generated successfully -> {output}")
    else:
        print(markdown)

def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the command-line interface."""
    parser = argparse.ArgumentParser(description="catmind: a rule-based virtual cat")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a headless play session")
    run_parser.add_argument("--config", "-c", type=str, help="Path to the configuration file")
    run_parser.add_argument("--seconds", "-s", type=float, help="Simulated seconds to run (real time if omitted)")
    run_parser.add_argument("--toy", type=float, nargs=2, metavar=("X", "Y"), help="Place a toy at X Y")
    run_parser.add_argument("--state", type=str, help="Load the cat from this save file")
    run_parser.add_argument("--save", type=str, help="Save the cat to this file on exit")
    run_parser.add_argument("--name", type=str, default=DEFAULT_CAT_NAME, help="Cat name")
    run_parser.add_argument("--seed", type=int, help="Random seed")

    graph_parser = subparsers.add_parser("graph", help="Render the behavior computation graph")
    graph_parser.add_argument("--behavior", "-b", type=str, help="Behavior YAML (packaged default if omitted)")
    graph_parser.add_argument("--output", "-o", type=str, help="Markdown file to write")

    args = parser.parse_args(argv)
    if args.command == "run":
        run(args.config, args.seconds, args.toy, args.state, args.save, args.name, args.seed)
    else:
        graph(args.behavior, args.output)

if __name__ == "__main__":
    main()
