import argparse
import logging
import os
import sys
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from rcpsp_grasp.config import load_config, params_from_config
from rcpsp_grasp.experiments.aggregate import write_summary_csv
from rcpsp_grasp.experiments.runner import ExperimentRunner, generate_plan
from rcpsp_grasp.export import (
    export_dot_precedence_graph,
    format_problem,
    format_schedule_table,
    format_sequence,
)
from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.modes.population import run_population, save_population_results
from rcpsp_grasp.parser import parse_psplib_data
from rcpsp_grasp.visualization import (
    next_unique_path,
    plot_gantt,
    plot_makespan_histogram,
    plot_resource_usage,
)

logger = logging.getLogger("rcpsp.main")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcpsp-grasp",
        description="GRASP construction heuristic for the RCPSP (PSPLIB .sm instances)",
    )
    parser.add_argument("instance", nargs="?", help="PSPLIB single-mode instance file")
    parser.add_argument("--config", help="YAML/JSON configuration file")
    parser.add_argument("-p", "--population-size", type=int, help="number of independent runs")
    parser.add_argument("-a", "--alpha", type=float, help="RCL greediness in [0, 1]")
    parser.add_argument("--random-seed", type=int, help="base seed, 0 = current time")
    parser.add_argument("--workers", type=int, help="worker processes for the population")
    parser.add_argument("--print-problem", action="store_true", help="print the instance")
    parser.add_argument(
        "--print-graph", metavar="FILE", help="write the precedence graph (Graphviz DOT); '-' = stdout"
    )
    parser.add_argument("--print-table", action="store_true", help="print resource usage tables")
    parser.add_argument("--print-plot", metavar="DIR", help="save Gantt/resource/histogram charts")
    parser.add_argument("--results-dir", help="save the population result as JSON")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def _merge_cli(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Command line values override the config file."""
    grasp = dict(cfg.get("grasp") or {})
    for key in ("population_size", "alpha", "random_seed", "workers"):
        value = getattr(args, key)
        if value is not None:
            grasp[key] = value
    cfg["grasp"] = grasp
    if args.instance:
        cfg["instance"] = args.instance
    if args.log_level:
        cfg["log_level"] = args.log_level
    output = dict(cfg.get("output") or {})
    if args.results_dir:
        output["results_dir"] = args.results_dir
    if args.print_plot:
        output["charts_dir"] = args.print_plot
    cfg["output"] = output
    return cfg


def run_experiments(exp_cfg: Dict[str, Any]) -> None:
    instance_files = exp_cfg.get("instance_files") or []
    if not instance_files:
        raise ValueError("experiment.instance_files list must be set and non-empty")
    plan = generate_plan(
        instance_files=instance_files,
        alphas=exp_cfg.get("alphas") or [0.75],
        seeds=exp_cfg.get("seeds") or [1],
        population_size=int(exp_cfg.get("population_size", 100)),
        workers=int(exp_cfg.get("workers", 1)),
    )
    runner = ExperimentRunner(exp_cfg.get("results_dir", "results/experiments"))
    runner.run(plan)
    write_summary_csv(runner.timestamp_dir)
    logger.info("Experiment batch completed: %d runs", len(plan))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    cfg: Dict[str, Any] = load_config(args.config) if args.config else {}
    cfg = _merge_cli(cfg, args)

    log_level = cfg.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    exp_cfg = cfg.get("experiment") or {}
    if exp_cfg.get("enabled"):
        run_experiments(exp_cfg)
        return 0

    instance_path = cfg.get("instance")
    if not instance_path:
        build_arg_parser().print_usage()
        return 2

    params = params_from_config(cfg)
    if params.random_seed == 0:
        params.random_seed = int(time.time())
    params.validate()

    instance = parse_psplib_data(instance_path)
    graph = TaskGraph.from_instance(instance)
    logger.info(
        "Instance: %s jobs=%d resources=%d horizon=%d",
        instance_path,
        graph.size,
        graph.resources_number,
        graph.horizon,
    )
    logger.info(
        "Options: population-size=%d alpha=%s random-seed=%d workers=%d",
        params.population_size,
        params.alpha,
        params.random_seed,
        params.workers,
    )

    if args.print_problem:
        print(format_problem(graph))
        print()
    if args.print_graph:
        if args.print_graph == "-":
            export_dot_precedence_graph(graph, sys.stdout)
        else:
            try:
                with open(args.print_graph, "w", encoding="utf-8") as f:
                    export_dot_precedence_graph(graph, f)
                logger.info("Saved precedence graph to %s", args.print_graph)
            except OSError as e:
                logger.warning("Failed to write precedence graph: %s", e)

    result = run_population(graph, params)
    best = result.best

    print(f"Best solution: {format_sequence(best.sequence)}")
    print(f"Best makespan: {best.makespan}")

    if args.print_table:
        print(format_schedule_table(best))

    output = cfg.get("output") or {}
    if output.get("results_dir"):
        try:
            save_population_results(result, instance_path, output["results_dir"])
        except OSError as e:
            logger.warning("Failed to write results JSON: %s", e)
    if args.print_plot:
        charts_dir = output["charts_dir"]
        stem = os.path.splitext(os.path.basename(instance_path))[0]
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        try:
            plot_gantt(
                best,
                next_unique_path(
                    os.path.join(charts_dir, f"gantt_{stem}_c{best.makespan}_{stamp}.png")
                ),
            )
            plot_resource_usage(
                best, next_unique_path(os.path.join(charts_dir, f"resources_{stem}_{stamp}.png"))
            )
            plot_makespan_histogram(
                result.makespans,
                next_unique_path(os.path.join(charts_dir, f"makespans_{stem}_{stamp}.png")),
                alpha=params.alpha,
            )
        except OSError as e:
            logger.warning("Failed to create charts: %s", e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
