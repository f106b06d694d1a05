import argparse
import asyncio
import sys
import time
from typing import Optional

from tqdm import tqdm

from harvest.config import HarvestConfig, load_config
from harvest.logging import add_log_file, get_logger, set_log_level
from harvest.processing.product_processor import ProductProcessor
from harvest.processing.runner import HarvestRunner, HarvestStats
from harvest.writers.registry_writer import JsonlRegistryWriter


async def harvest(cfg: HarvestConfig) -> HarvestStats:
    logger = get_logger("pipeline")
    logger.info(f"Starting harvest job {cfg.job.job_id}")

    start_time = time.perf_counter()
    input_files = cfg.inputs.get_files()
    logger.info(f"Found {len(input_files)} label files")

    writer = JsonlRegistryWriter(cfg.registry.output_dir)
    processor = ProductProcessor(writer, debug=cfg.log_level.value == "DEBUG")

    # total grows as collection inventories are discovered
    with tqdm(total=len(input_files), desc="Harvesting labels", unit="file") as pbar:
        def on_progress(result, discovered):
            if discovered:
                pbar.total += discovered
                pbar.refresh()
            pbar.update(1)

        runner = HarvestRunner(
            processor,
            cfg.job,
            workers=cfg.workers,
            fail_fast=cfg.fail_fast,
            on_progress=on_progress,
        )
        try:
            stats = await runner.run(input_files)
        finally:
            await writer.close()

    elapsed_time = time.perf_counter() - start_time
    logger.info(f"Harvest completed in {elapsed_time:.2f} seconds")
    logger.info(f"Wrote {writer.count} records to {writer.output_file(cfg.job.job_id)}")
    return stats


def apply_overrides(cfg: HarvestConfig, args: argparse.Namespace) -> HarvestConfig:
    updates = {}
    if args.workers:
        updates["workers"] = args.workers
    if args.fail_fast:
        updates["fail_fast"] = True
    if args.job_id:
        updates["job"] = cfg.job.model_copy(update={"job_id": args.job_id})
    return cfg.model_copy(update=updates) if updates else cfg


def main(args: argparse.Namespace) -> int:
    """entry point for a harvest run"""
    cfg = apply_overrides(load_config(args.config), args)

    set_log_level(cfg.log_level.value)
    if cfg.log_dir:
        add_log_file(cfg.log_dir)

    stats = asyncio.run(harvest(cfg))
    print(
        f"processed={stats.processed} skipped={stats.skipped} "
        f"failed={stats.failed} discovered={stats.discovered}"
    )
    return 1 if stats.failed else 0


def cli(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog = "harvest")
    subparsers = parser.add_subparsers(dest = "command")

    run_parser = subparsers.add_parser("run", help = "Harvest metadata from PDS4 labels")
    run_parser.add_argument("-c", "--config", default = "config.yaml", help = "Path to the harvest config file")
    run_parser.add_argument("--job-id", help = "Override the generated job id")
    run_parser.add_argument("--workers", type = int, help = "Number of concurrent workers")
    run_parser.add_argument("--fail-fast", action = "store_true", help = "Stop at the first failed label")

    args = parser.parse_args(argv)

    if args.command == "run":
        return main(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(cli())
